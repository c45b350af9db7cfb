"""Configuration management using pydantic-settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional
import logging
import sys
import structlog


class IngestionSettings(BaseSettings):
    """Ingestion pipeline configuration loaded from environment variables.

    All settings prefixed with INGEST_ (e.g., INGEST_MAX_CONFLICT_RETRIES=3)
    """

    max_conflict_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a run that loses a unique-constraint race"
    )
    poll_batch_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum scrape results drained from the Redis list per poll"
    )
    retry_delay_seconds: int = Field(
        default=30,
        ge=1,
        le=3600,
        description="Base delay before an arq retry after a storage failure"
    )
    max_job_tries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Total arq attempts for an ingestion job before it lands in the DLQ"
    )

    model_config = SettingsConfigDict(
        env_prefix="INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AnalyticsSettings(BaseSettings):
    """Price analytics configuration.

    All settings prefixed with ANALYTICS_ (e.g., ANALYTICS_DEFAULT_WINDOW_DAYS=30)
    """

    default_window_days: int = Field(
        default=30,
        ge=0,
        le=3650,
        description="Lookback window used when the caller gives none"
    )
    low_volatility_pct: float = Field(
        default=5.0,
        ge=0,
        description="Fluctuation below this percentage is LOW"
    )
    high_volatility_pct: float = Field(
        default=15.0,
        ge=0,
        description="Fluctuation at or above this percentage is HIGH"
    )
    unknown_market_label: str = "Unknown Market"
    national_label: str = "National Average"

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str
    db_pool_size: int = Field(default=20, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=100)

    # Redis Configuration
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_password: str
    redis_url: Optional[str] = None

    # Queue Configuration
    queue_name: str = "price-ingestion-queue"
    dlq_name: str = "price-ingestion-dlq"
    scrape_request_queue: str = "scrape_request_queue"
    scraped_data_queue: str = "scraped_data_queue"

    # Scrape trigger
    scrape_target_url: str = "https://www.da.gov.ph/price-monitoring/"
    scrape_hour: int = Field(
        default=1,
        ge=0,
        le=23,
        description="UTC hour of the daily scrape request"
    )

    # Worker Configuration
    max_workers: int = 5
    job_timeout: int = 300
    log_level: str = "INFO"
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        """Initialize settings and build derived values."""
        super().__init__(**kwargs)
        if not self.redis_url:
            self.redis_url = f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/0"


# Global settings instances
settings = Settings()
ingestion_settings = IngestionSettings()
analytics_settings = AnalyticsSettings()


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog for JSON logging."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level)
