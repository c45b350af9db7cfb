"""Redis list transport shared with the external scraper.

The scraper is not an arq worker. It consumes JSON scrape requests from
SCRAPE_REQUEST_QUEUE and pushes JSON scrape results onto
SCRAPED_DATA_QUEUE.
"""
import json
from typing import Any, Dict, List

from redis.asyncio import Redis
from redis.exceptions import RedisError
import structlog

from pricewatch.config import settings
from pricewatch.models.queue_message import ScrapeRequestMessage

logger = structlog.get_logger(__name__)


async def publish_scrape_request(redis: Redis, message: ScrapeRequestMessage) -> int:
    """Push a scrape request onto the request list.

    Returns:
        Length of the request list after the push
    """
    length = await redis.rpush(settings.scrape_request_queue, message.model_dump_json())
    logger.info(
        "scrape_request_published",
        queue=settings.scrape_request_queue,
        url=message.url,
        triggered_by=message.triggered_by,
        queue_length=length,
    )
    return length


async def pop_scraped_results(
    redis: Redis,
    max_count: int = 10,
) -> List[Dict[str, Any]]:
    """Pop up to max_count scrape result documents from the result list.
    
    LPOP removes each element atomically, so concurrent pollers never
    receive the same document. Elements that are not valid UTF-8 JSON
    objects are logged and dropped without affecting the rest of the batch.
    
    Args:
        redis: Redis connection
        max_count: Maximum documents to retrieve at once
    
    Returns:
        List of decoded documents (empty on Redis failure)
    """
    documents = []

    try:
        for _ in range(max_count):
            raw = await redis.lpop(settings.scraped_data_queue)
            if not raw:
                break

            try:
                if isinstance(raw, bytes):
                    raw = raw.decode()
                document = json.loads(raw)
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning("scraped_result_invalid_json", error=str(e))
                continue
            if not isinstance(document, dict):
                logger.warning("scraped_result_not_an_object", type=type(document).__name__)
                continue
            documents.append(document)

        if documents:
            logger.debug("scraped_results_retrieved", count=len(documents))
        return documents

    except RedisError as e:
        logger.error("pop_scraped_results_failed", error=str(e))
        return documents
