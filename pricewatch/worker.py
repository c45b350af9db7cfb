"""arq worker configuration for the price ingestion pipeline.

This module configures the arq worker with:
    - ingest_scrape_result_task: Ingest one scrape result atomically
    - request_scrape_task: Publish a scrape request for the external scraper
    - scheduled_scrape_task: Daily scrape request (cron)
    - poll_scraped_results: Drain scraped results into ingestion jobs (cron)
"""
from arq.connections import RedisSettings, ArqRedis
from arq import cron
from typing import Dict, Any
import structlog
from pricewatch.config import settings, ingestion_settings, configure_logging

from pricewatch.tasks.dead_letter import dlq_key, record_dead_letter
from pricewatch.tasks.ingestion_tasks import (
    ingest_scrape_result_task,
    poll_scraped_results,
)
from pricewatch.tasks.trigger_tasks import (
    request_scrape_task,
    scheduled_scrape_task,
)

# Configure logging
configure_logging(settings.log_level)
logger = structlog.get_logger(__name__)


async def monitor_queue_depth(ctx: Dict[str, Any]) -> None:
    """Log the depth of the job queue and the scraper lists.
    
    Args:
        ctx: Worker context (contains Redis connection)
    """
    redis: ArqRedis = ctx.get("redis")
    if not redis:
        logger.warning("monitor_queue_depth_no_redis")
        return

    logger.info(
        "queue_depth_monitor",
        queue_name=settings.queue_name,
        queue_depth=await redis.zcard(settings.queue_name),
        dlq_depth=await redis.scard(dlq_key()),
        scraped_data_depth=await redis.llen(settings.scraped_data_queue),
        scrape_request_depth=await redis.llen(settings.scrape_request_queue),
    )


async def on_job_end(ctx: Dict[str, Any]) -> None:
    """Hook called after each job ends (success or failure).
    
    Records jobs that failed on their final attempt in the DLQ set.
    
    Args:
        ctx: Worker context containing job metadata
    """
    job_try = ctx.get("job_try", 1)
    job_result = ctx.get("job_result")
    job_id = ctx.get("job_id", "unknown")
    max_tries = WorkerSettings.max_tries

    is_failed = isinstance(job_result, Exception)
    exhausted = job_try >= max_tries

    if not (is_failed and exhausted):
        logger.debug(
            "on_job_end_skipped",
            job_id=job_id,
            job_try=job_try,
            max_tries=max_tries,
            is_failed=is_failed,
        )
        return

    redis: ArqRedis = ctx.get("redis")
    if not redis:
        logger.warning("on_job_end_no_redis", job_id=job_id)
        return

    await record_dead_letter(redis, job_id, error=str(job_result))


class WorkerSettings:
    """arq worker configuration settings.
    
    This class is imported by arq CLI: `arq pricewatch.worker.WorkerSettings`
    
    Registered Tasks:
        - ingest_scrape_result_task: Ingest one scrape result
        - request_scrape_task: Publish a scrape request
        
    Cron Jobs:
        - scheduled_scrape_task: Daily at SCRAPE_HOUR (UTC)
        - poll_scraped_results: Every 10 seconds
        - monitor_queue_depth: Every 5 minutes
    """
    
    redis_settings = RedisSettings.from_dsn(settings.redis_url)
    queue_name = settings.queue_name
    max_jobs = settings.max_workers
    job_timeout = settings.job_timeout
    keep_result = 3600  # Keep results for 1 hour
    max_tries = ingestion_settings.max_job_tries
    
    functions = [
        ingest_scrape_result_task,
        request_scrape_task,
    ]
    
    on_job_end = on_job_end
    
    cron_jobs = [
        cron(
            scheduled_scrape_task,
            hour=settings.scrape_hour,
            minute=0,
            unique=True,
            run_at_startup=False,
        ),
        cron(
            poll_scraped_results,
            second={0, 10, 20, 30, 40, 50},
            unique=True,
        ),
        cron(monitor_queue_depth, minute=set(range(0, 60, 5))),
    ]
