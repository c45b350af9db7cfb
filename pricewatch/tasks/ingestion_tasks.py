"""Queue tasks for the price ingestion pipeline.

This module implements:
    - ingest_scrape_result_task: Validate and ingest one scrape result
    - poll_scraped_results: Drain the scraper's result list into ingestion jobs

Error policy at the task boundary:
    - Invalid payload or ConsistencyError: error result, no retry
    - DatabaseError: arq Retry with linear back-off until max tries,
      then the job id goes to the DLQ set and the error propagates
"""
import time
import uuid
from typing import Any, Dict, Optional, Union

from arq import Retry
from arq.connections import ArqRedis
from pydantic import ValidationError as PydanticValidationError
import structlog

from pricewatch.config import settings, ingestion_settings
from pricewatch.errors.exceptions import ConsistencyError, DatabaseError
from pricewatch.models.scrape_result import ScrapeResult
from pricewatch.services.ingestion import IngestionResult, ingest_scrape_result
from pricewatch.services.scrape_queue import pop_scraped_results
from pricewatch.tasks.dead_letter import record_dead_letter

logger = structlog.get_logger(__name__)


# ============================================================================
# Observability Metrics Logging
# ============================================================================

def emit_metric(metric_name: str, value: float, labels: Dict[str, str] = None) -> None:
    """Emit a metric event for observability.
    
    Args:
        metric_name: Name of the metric (e.g., "price_records_written_total")
        value: Numeric value of the metric
        labels: Optional labels/tags for the metric
    """
    labels = labels or {}
    logger.info(
        "metric",
        metric_name=metric_name,
        metric_value=value,
        **labels,
    )


def emit_ingestion_metrics(result: IngestionResult) -> None:
    """Emit run metrics for a finished ingestion."""
    emit_metric(
        "price_records_written_total",
        result.records_written,
        {"status": result.status},
    )
    for outcome, count in result.match_outcomes.items():
        emit_metric("products_matched_total", count, {"outcome": outcome})
    emit_metric(
        "ingestion_duration_seconds",
        round(result.duration_seconds, 3),
        {"status": result.status},
    )


def _parse_payload(payload: Union[Dict[str, Any], str, bytes]) -> ScrapeResult:
    if isinstance(payload, (str, bytes)):
        return ScrapeResult.model_validate_json(payload)
    return ScrapeResult.model_validate(payload)


async def ingest_scrape_result_task(
    ctx: Dict[str, Any],
    payload: Union[Dict[str, Any], str],
    task_id: Optional[str] = None,
    **kwargs
) -> Dict[str, Any]:
    """Ingest one scrape result as a single atomic batch.
    
    Args:
        ctx: Worker context (contains Redis connection and job_try)
        payload: Scrape result document (dict or JSON string)
        task_id: Identifier for logging (generated if omitted)
        
    Returns:
        Dictionary with the ingestion result or error details
        
    Raises:
        Retry: On storage failure while attempts remain
        DatabaseError: On storage failure after the final attempt
    """
    task_id = task_id or f"ingest-{uuid.uuid4()}"
    job_try = ctx.get("job_try", 1)
    log = logger.bind(task_id=task_id, job_try=job_try)

    try:
        scrape_result = _parse_payload(payload)
    except PydanticValidationError as e:
        log.error("scrape_result_invalid", errors=e.error_count(), error=str(e))
        return {
            "task_id": task_id,
            "status": "error",
            "error": f"Invalid scrape result: {e.error_count()} validation error(s)",
        }

    log = log.bind(report_date=scrape_result.date_processed)
    log.info(
        "ingest_scrape_result_task_started",
        products=len(scrape_result.products or []),
        markets=len(scrape_result.covered_markets or []),
    )

    try:
        result = await ingest_scrape_result(scrape_result)
    except ConsistencyError as e:
        log.error("ingestion_consistency_error", error=e.message)
        return {
            "task_id": task_id,
            "status": "error",
            "error": e.message,
        }
    except DatabaseError as e:
        if job_try < ingestion_settings.max_job_tries:
            defer = job_try * ingestion_settings.retry_delay_seconds
            log.warning("ingestion_retry_scheduled", error=e.message, defer_seconds=defer)
            raise Retry(defer=defer) from e
        log.error("ingestion_failed_permanently", error=e.message)
        redis: Optional[ArqRedis] = ctx.get("redis")
        if redis:
            await record_dead_letter(redis, ctx.get("job_id", task_id), error=e.message)
        raise

    emit_ingestion_metrics(result)
    log.info("ingest_scrape_result_task_completed", **result.to_dict())
    return {
        "task_id": task_id,
        **result.to_dict(),
    }


async def poll_scraped_results(
    ctx: Dict[str, Any],
    **kwargs
) -> Optional[Dict[str, Any]]:
    """Poll the scraped data list and enqueue an ingestion job per document.
    
    This task runs every 10 seconds. Each document gets its own job so
    that retries and the DLQ apply per scrape result.
    
    Args:
        ctx: Worker context (contains Redis connection)
        
    Returns:
        Dict with enqueued job ids if documents were found, else None
    """
    redis: Optional[ArqRedis] = ctx.get("redis")
    if not redis:
        return None

    documents = await pop_scraped_results(redis, max_count=ingestion_settings.poll_batch_size)
    if not documents:
        return None

    logger.info("scraped_results_found", count=len(documents))

    jobs = []
    for document in documents:
        task_id = f"ingest-{int(time.time())}-{uuid.uuid4().hex[:8]}"
        job = await redis.enqueue_job(
            "ingest_scrape_result_task",
            payload=document,
            task_id=task_id,
            _queue_name=settings.queue_name,
        )
        jobs.append({
            "task_id": task_id,
            "job_id": job.job_id if job else None,
            "status": "enqueued" if job else "duplicate",
        })

    return {
        "status": "success",
        "enqueued": sum(1 for job in jobs if job["status"] == "enqueued"),
        "jobs": jobs,
    }
