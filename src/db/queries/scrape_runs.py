"""Run ledger for competitor scrapes.

A ``running`` row doubles as an advisory lock for its source until
``lock_expires_at``; rows past that expiry are stale and may be overridden.
"""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

import asyncpg

from src.models.competitor import CompetitorSource
from src.models.scrape_run import ScrapeRun, ScrapeRunStatus

Executor = asyncpg.Pool | asyncpg.Connection


@asynccontextmanager
async def source_lock(
    pool: asyncpg.Pool, source: CompetitorSource
) -> AsyncIterator[asyncpg.Connection]:
    """Open a transaction serialized per source across all processes.

    Reading the last run and inserting a new one inside this block is atomic
    with respect to other refreshes of the same source.
    """
    async with pool.acquire() as conn:
        async with conn.transaction():
            await conn.execute(
                "SELECT pg_advisory_xact_lock(hashtext($1))", f"scrape_runs:{source.value}"
            )
            yield conn


def _parse_row(row: asyncpg.Record) -> ScrapeRun:
    data = dict(row)
    if isinstance(data.get("result"), str):
        data["result"] = json.loads(data["result"])
    return ScrapeRun(**data)


async def get_last_scrape_run(conn: Executor, source: CompetitorSource) -> ScrapeRun | None:
    row = await conn.fetchrow(
        "SELECT * FROM scrape_runs WHERE source = $1 ORDER BY started_at DESC LIMIT 1",
        source.value,
    )
    return _parse_row(row) if row else None


async def get_last_successful_scrape_run(
    conn: Executor, source: CompetitorSource
) -> ScrapeRun | None:
    row = await conn.fetchrow(
        "SELECT * FROM scrape_runs WHERE source = $1 AND status = $2 "
        "ORDER BY started_at DESC LIMIT 1",
        source.value,
        ScrapeRunStatus.SUCCESS.value,
    )
    return _parse_row(row) if row else None


async def create_scrape_run(
    conn: Executor,
    source: CompetitorSource,
    lock_minutes: int,
    *,
    now: datetime | None = None,
) -> ScrapeRun:
    started_at = now or datetime.now(UTC)
    row = await conn.fetchrow(
        """
        INSERT INTO scrape_runs (id, source, status, started_at, lock_expires_at)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
        """,
        uuid4(),
        source.value,
        ScrapeRunStatus.RUNNING.value,
        started_at,
        started_at + timedelta(minutes=lock_minutes),
    )
    assert row is not None
    return _parse_row(row)


async def finish_scrape_run(
    conn: Executor,
    run_id: UUID,
    status: ScrapeRunStatus,
    *,
    result: dict[str, Any] | None = None,
    error: str | None = None,
    now: datetime | None = None,
) -> None:
    await conn.execute(
        """
        UPDATE scrape_runs
        SET status = $2, finished_at = $3, result = $4::jsonb, error = $5
        WHERE id = $1
        """,
        run_id,
        status.value,
        now or datetime.now(UTC),
        result,
        error,
    )
