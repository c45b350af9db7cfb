"""Dead letter set for jobs that failed on their final attempt."""
from typing import Optional

from redis.asyncio import Redis
import structlog

from pricewatch.config import settings

logger = structlog.get_logger(__name__)

DLQ_TTL_SECONDS = 86400 * 7


def dlq_key() -> str:
    return f"arq:dlq:{settings.dlq_name}"


async def record_dead_letter(redis: Redis, job_id: str, error: Optional[str] = None) -> None:
    """Add a job id to the DLQ set and refresh the set's 7 day TTL."""
    logger.warning(
        "job_moved_to_dlq",
        job_id=job_id,
        dlq_name=settings.dlq_name,
        error=error,
    )
    await redis.sadd(dlq_key(), job_id)
    await redis.expire(dlq_key(), DLQ_TTL_SECONDS)
