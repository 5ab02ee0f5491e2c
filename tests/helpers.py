"""Test doubles shared across the unit tests."""

from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import httpx

from src.db.queries.competitor_prices import dedupe_batch
from src.models.competitor import (
    ChangeDetectionState,
    CompetitorPriceRecord,
    CompetitorSource,
    ScrapeResult,
)
from src.models.scrape_run import ScrapeRun, ScrapeRunStatus
from src.scraping.extractors.base import BaseExtractor


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)


class FrozenClock:
    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeRunLedger:
    """In-memory stand-in for src.db.queries.scrape_runs."""

    def __init__(self) -> None:
        self.runs: list[ScrapeRun] = []
        self.lock_calls: list[CompetitorSource] = []

    @asynccontextmanager
    async def source_lock(self, pool, source):
        self.lock_calls.append(source)
        yield pool

    def _latest(self, source, status=None) -> ScrapeRun | None:
        candidates = [
            r
            for r in reversed(self.runs)
            if r.source == source and (status is None or r.status == status)
        ]
        return max(candidates, key=lambda r: r.started_at) if candidates else None

    def runs_for(self, source: CompetitorSource) -> list[ScrapeRun]:
        return [r for r in self.runs if r.source == source]

    async def get_last_scrape_run(self, conn, source):
        return self._latest(source)

    async def get_last_successful_scrape_run(self, conn, source):
        return self._latest(source, ScrapeRunStatus.SUCCESS)

    async def create_scrape_run(self, conn, source, lock_minutes, *, now=None):
        now = now or datetime.now(UTC)
        run = ScrapeRun(
            id=uuid4(),
            source=source,
            status=ScrapeRunStatus.RUNNING,
            started_at=now,
            lock_expires_at=now + timedelta(minutes=lock_minutes),
        )
        self.runs.append(run)
        return run

    async def finish_scrape_run(
        self, conn, run_id: UUID, status, *, result=None, error=None, now=None
    ):
        run = next(r for r in self.runs if r.id == run_id)
        run.status = status
        run.finished_at = now or datetime.now(UTC)
        run.result = result
        run.error = error


class FakePriceTable:
    """In-memory stand-in for src.db.queries.competitor_prices, unique on
    (source, service_name, content_hash)."""

    def __init__(self) -> None:
        self.rows: list[CompetitorPriceRecord] = []

    async def insert_prices(self, pool, records):
        keys = {(r.source, r.service_name, r.content_hash or "") for r in self.rows}
        written = 0
        for rec in dedupe_batch(records):
            key = (rec.source, rec.service_name, rec.content_hash or "")
            if key in keys:
                continue
            keys.add(key)
            self.rows.append(rec)
            written += 1
        return written


class StubExtractor(BaseExtractor):
    """Returns scripted results and records the prior state it was given."""

    def __init__(
        self,
        source: CompetitorSource,
        respond: Callable[[ChangeDetectionState | None], ScrapeResult],
    ):
        self.source = source
        super().__init__(None)  # type: ignore[arg-type]
        self.respond = respond
        self.priors: list[ChangeDetectionState | None] = []

    async def extract(self, prior=None):
        self.priors.append(prior)
        return self.respond(prior)
