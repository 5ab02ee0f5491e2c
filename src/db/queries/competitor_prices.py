import json
from decimal import Decimal
from uuid import uuid4

import asyncpg
import structlog

from src.config.constants import LATEST_PRICES_LIMIT
from src.models.competitor import CompetitorPriceRecord, CompetitorSource

log = structlog.get_logger()


def dedupe_batch(records: list[CompetitorPriceRecord]) -> list[CompetitorPriceRecord]:
    """Drop repeats of (source, service_name, price), keeping the first."""
    seen: set[tuple[str, str, float]] = set()
    unique: list[CompetitorPriceRecord] = []
    for rec in records:
        key = (rec.source.value, rec.service_name, rec.price)
        if key in seen:
            continue
        seen.add(key)
        unique.append(rec)
    return unique


async def insert_prices(pool: asyncpg.Pool, records: list[CompetitorPriceRecord]) -> int:
    """Upsert a batch of price records and return the number of rows written.

    Rows whose (source, service_name, content_hash) already exists are
    ignored, so re-extracting an unchanged document writes nothing.
    """
    rows = dedupe_batch(records)
    if not rows:
        return 0

    written = await pool.fetch(
        """
        INSERT INTO competitor_prices
            (id, source, service_name, category, price, currency,
             observations, content_hash, captured_at, metadata)
        SELECT r.id, r.source, r.service_name, r.category, r.price, r.currency,
               r.observations, r.content_hash, r.captured_at, r.metadata::jsonb
        FROM unnest(
            $1::uuid[], $2::text[], $3::text[], $4::text[], $5::numeric[],
            $6::text[], $7::text[], $8::text[], $9::timestamptz[], $10::text[]
        ) AS r(id, source, service_name, category, price, currency,
               observations, content_hash, captured_at, metadata)
        ON CONFLICT (source, service_name, content_hash) DO NOTHING
        RETURNING id
        """,
        [uuid4() for _ in rows],
        [r.source.value for r in rows],
        [r.service_name for r in rows],
        [r.category.value for r in rows],
        [Decimal(str(r.price)) for r in rows],
        [r.currency for r in rows],
        [r.observations for r in rows],
        [r.content_hash or "" for r in rows],
        [r.captured_at for r in rows],
        [json.dumps(r.metadata) for r in rows],
    )
    log.info(
        "competitor_prices_inserted",
        received=len(records),
        unique=len(rows),
        written=len(written),
    )
    return len(written)


def _parse_row(row: asyncpg.Record) -> CompetitorPriceRecord:
    data = dict(row)
    if isinstance(data.get("metadata"), str):
        data["metadata"] = json.loads(data["metadata"])
    data["metadata"] = data.get("metadata") or {}
    data["price"] = float(data["price"])
    data["content_hash"] = data.get("content_hash") or None
    return CompetitorPriceRecord(**data)


async def get_latest_by_source(
    pool: asyncpg.Pool,
    source: CompetitorSource,
    *,
    limit: int = LATEST_PRICES_LIMIT,
) -> list[CompetitorPriceRecord]:
    rows = await pool.fetch(
        "SELECT * FROM competitor_prices WHERE source = $1 "
        "ORDER BY captured_at DESC LIMIT $2",
        source.value,
        limit,
    )
    return [_parse_row(row) for row in rows]
