from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from src.db.queries.competitor_prices import dedupe_batch, get_latest_by_source, insert_prices
from src.models.competitor import CompetitorPriceRecord, CompetitorSource, ServiceCategory

CAPTURED = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def _record(name: str, price: float, content_hash: str | None = "h1") -> CompetitorPriceRecord:
    return CompetitorPriceRecord(
        source=CompetitorSource.CERINI,
        service_name=name,
        category=ServiceCategory.HAIRCUT,
        price=price,
        currency="ARS",
        captured_at=CAPTURED,
        content_hash=content_hash,
    )


def test_dedupe_batch_keeps_first_occurrence():
    first = _record("Corte", 100)
    records = [first, _record("Corte", 100, content_hash="h2"), _record("Corte", 200)]

    unique = dedupe_batch(records)

    assert unique == [first, records[2]]


async def test_insert_prices_empty_batch_skips_query():
    pool = MagicMock()
    pool.fetch = AsyncMock()

    assert await insert_prices(pool, []) == 0
    pool.fetch.assert_not_awaited()


async def test_insert_prices_returns_rows_written():
    pool = MagicMock()
    pool.fetch = AsyncMock(return_value=[{"id": uuid4()}])
    records = [
        _record("Corte", 100),
        _record("Corte", 100),
        _record("Barba", 50, content_hash=None),
    ]

    written = await insert_prices(pool, records)

    assert written == 1
    query, *args = pool.fetch.await_args.args
    assert "ON CONFLICT (source, service_name, content_hash) DO NOTHING" in query
    assert args[1] == ["cerini", "cerini"]
    assert args[2] == ["Corte", "Barba"]
    assert args[4] == [Decimal("100.0"), Decimal("50.0")]
    # Missing hashes are stored as the empty string so the unique key applies
    assert args[7] == ["h1", ""]
    assert args[9] == ["{}", "{}"]


async def test_get_latest_by_source_parses_rows():
    row = {
        "id": uuid4(),
        "source": "mala",
        "service_name": "Corte Dama",
        "category": "haircut",
        "price": Decimal("15000.00"),
        "currency": "ARS",
        "observations": None,
        "content_hash": "",
        "captured_at": CAPTURED,
        "metadata": '{"page": 1}',
    }
    pool = MagicMock()
    pool.fetch = AsyncMock(return_value=[row])

    records = await get_latest_by_source(pool, CompetitorSource.MALA)

    assert records[0].source == CompetitorSource.MALA
    assert records[0].price == 15000.0
    assert records[0].category == ServiceCategory.HAIRCUT
    assert records[0].content_hash is None
    assert records[0].metadata == {"page": 1}
    query, source, limit = pool.fetch.await_args.args
    assert "ORDER BY captured_at DESC" in query
    assert (source, limit) == ("mala", 200)
