#!/usr/bin/env python3
"""Helper script for enqueuing ingestion and scrape request jobs.

Usage:
    # Ingest a scrape result document saved by the scraper
    python scripts/enqueue_scrape.py ingest --file scraped/2025-12-15.json

    # Ask the scraper to fetch a page now
    python scripts/enqueue_scrape.py request --url "https://www.da.gov.ph/price-monitoring/"
"""
import asyncio
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to path
script_dir = Path(__file__).parent
project_root = script_dir.parent
sys.path.insert(0, str(project_root))

from arq.connections import RedisSettings, create_pool
from arq import ArqRedis
from pydantic import ValidationError

from pricewatch.config import settings
from pricewatch.models import ScrapeResult


async def enqueue(function: str, **kwargs: Any) -> Optional[str]:
    """Enqueue a worker function on the configured queue."""
    pool: ArqRedis = await create_pool(RedisSettings.from_dsn(settings.redis_url))
    try:
        job = await pool.enqueue_job(function, _queue_name=settings.queue_name, **kwargs)
        return job.job_id if job else None
    finally:
        await pool.close()


def load_document(path: Path) -> Dict[str, Any]:
    """Read and validate a scrape result file."""
    document = json.loads(path.read_text(encoding="utf-8"))
    ScrapeResult.model_validate(document)
    return document


def main():
    parser = argparse.ArgumentParser(
        description="Enqueue price ingestion jobs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Enqueue ingest_scrape_result_task")
    ingest.add_argument("--file", required=True, type=Path, help="Scrape result JSON file")
    ingest.add_argument("--task-id", help="Task ID for logging (auto-generated if not provided)")

    request = subparsers.add_parser("request", help="Enqueue request_scrape_task")
    request.add_argument("--url", help=f"Page to scrape (default: {settings.scrape_target_url})")

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and print job details without enqueuing"
    )

    args = parser.parse_args()

    if args.command == "ingest":
        try:
            document = load_document(args.file)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            print(f"❌ Invalid scrape result file {args.file}: {e}")
            sys.exit(1)
        function = "ingest_scrape_result_task"
        kwargs = {"payload": document, "task_id": args.task_id}
        summary = f"report date {document.get('date_processed')}, {len(document.get('price_data') or [])} price lines"
    else:
        function = "request_scrape_task"
        kwargs = {"url": args.url}
        summary = f"url {args.url or settings.scrape_target_url}"

    if args.dry_run:
        print("🔍 DRY RUN - Job details:")
        print(f"   Function: {function}")
        print(f"   Queue:    {settings.queue_name}")
        print(f"   Details:  {summary}")
        return

    job_id = asyncio.run(enqueue(function, **kwargs))
    print(f"✅ Job enqueued: {job_id}")
    print(f"   Function: {function}")
    print(f"   Details:  {summary}")


if __name__ == "__main__":
    main()
