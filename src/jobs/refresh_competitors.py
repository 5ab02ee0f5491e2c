"""Run a competitor refresh from the command line (e.g. from cron).

    python -m src.jobs.refresh_competitors [--force] [--nocache]
"""

import argparse
import asyncio
import json

import structlog

from src.db.pool import close_pool, get_pool
from src.services.competitor_refresh import CompetitorRefreshService
from src.utils.logger import setup_logging

log = structlog.get_logger()


async def run_refresh(*, force: bool = False, nocache: bool = False) -> dict:
    pool = await get_pool()
    try:
        results = await CompetitorRefreshService(pool).refresh(force=force, nocache=nocache)
    finally:
        await close_pool()
    return {source: outcome.model_dump(mode="json") for source, outcome in results.items()}


def main() -> None:
    parser = argparse.ArgumentParser(description="Refresh competitor price lists")
    parser.add_argument("--force", action="store_true", help="bypass interval and lock checks")
    parser.add_argument("--nocache", action="store_true", help="ignore stored cache validators")
    args = parser.parse_args()

    setup_logging()
    results = asyncio.run(run_refresh(force=args.force, nocache=args.nocache))
    log.info("competitor_refresh_complete", results=results)
    print(json.dumps(results, indent=2))


if __name__ == "__main__":
    main()
