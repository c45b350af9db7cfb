#!/usr/bin/env python3
"""Seed a development database with synthetic price history.

Does nothing when the database already has markets.

Usage:
    python scripts/seed_history.py --file scraped/2025-12-20.json --days 30 --seed 42
"""
import asyncio
import argparse
import json
import random
import sys
from pathlib import Path

# Add project root to path
script_dir = Path(__file__).parent
project_root = script_dir.parent
sys.path.insert(0, str(project_root))

from pricewatch.db.base import async_session_maker
from pricewatch.models import ScrapeResult
from pricewatch.services.seeding import SyntheticHistoryGenerator, seed_history


async def run(source: ScrapeResult, days: int, seed: int, skip_probability: float) -> None:
    generator = SyntheticHistoryGenerator(
        rng=random.Random(seed),
        days=days,
        skip_probability=skip_probability,
    )
    async with async_session_maker() as session:
        async with session.begin():
            plan = await seed_history(session, generator, source)

    if plan is None:
        print("⚠️  Database already has markets. Skipping seeding.")
        return
    print(f"✅ Seeded {len(plan.reports)} reports and {len(plan.records)} price records")
    print(f"   Markets:  {len(plan.markets)}")
    print(f"   Products: {len(plan.products)}")


def main():
    parser = argparse.ArgumentParser(description="Seed synthetic price history")
    parser.add_argument("--file", required=True, type=Path, help="Template scrape result JSON file")
    parser.add_argument("--days", type=int, default=30, help="Days of history before today (default: 30)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible history")
    parser.add_argument("--skip-probability", type=float, default=0.10, help="Daily chance a market is unreported")
    args = parser.parse_args()

    source = ScrapeResult.model_validate(json.loads(args.file.read_text(encoding="utf-8")))
    asyncio.run(run(source, args.days, args.seed, args.skip_probability))


if __name__ == "__main__":
    main()
