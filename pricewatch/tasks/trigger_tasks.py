"""Scrape trigger tasks.

The scrape itself runs in an external service. These tasks only publish
ScrapeRequestMessage documents onto the scrape request list, either on
demand or from the daily cron.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from arq.connections import ArqRedis
from pydantic import ValidationError as PydanticValidationError
import structlog

from pricewatch.config import settings
from pricewatch.models.queue_message import ScrapeRequestMessage
from pricewatch.services.scrape_queue import publish_scrape_request

logger = structlog.get_logger(__name__)


async def request_scrape_task(
    ctx: Dict[str, Any],
    url: Optional[str] = None,
    triggered_by: Literal["manual", "scheduled"] = "manual",
    **kwargs
) -> Dict[str, Any]:
    """Ask the scraper to process a price report page.
    
    Args:
        ctx: Worker context (contains Redis connection)
        url: Page to scrape (defaults to SCRAPE_TARGET_URL)
        triggered_by: What initiated the request
        
    Returns:
        Dictionary with the published request or error details
    """
    redis: Optional[ArqRedis] = ctx.get("redis")
    if not redis:
        logger.warning("request_scrape_no_redis")
        return {"status": "error", "error": "Redis connection unavailable"}

    try:
        message = ScrapeRequestMessage(
            url=url or settings.scrape_target_url,
            triggered_by=triggered_by,
        )
    except PydanticValidationError as e:
        logger.error("scrape_request_invalid", url=url, error=str(e))
        return {"status": "error", "error": f"Invalid scrape request: {url}"}

    queue_length = await publish_scrape_request(redis, message)
    return {
        "status": "published",
        "queue": settings.scrape_request_queue,
        "queue_length": queue_length,
        **message.model_dump(),
    }


async def scheduled_scrape_task(
    ctx: Dict[str, Any],
    **kwargs
) -> Dict[str, Any]:
    """Cron wrapper that requests the daily scrape of the default target."""
    logger.info(
        "scheduled_scrape_task_started",
        started_at=datetime.now(timezone.utc).isoformat(),
    )
    return await request_scrape_task(ctx, triggered_by="scheduled")
