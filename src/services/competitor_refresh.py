"""Refresh orchestration for competitor price sources.

Sources are processed one after another. Each one is rate limited by the
finish time of its last run and guarded by the run-ledger lock, so concurrent
refresh requests from different processes cannot scrape the same source twice.
"""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Literal

import asyncpg
import structlog

from src.config.settings import Settings, get_settings
from src.db.queries import competitor_prices as price_queries
from src.db.queries import scrape_runs as run_queries
from src.models.api import FailedRefresh, SkippedRefresh, SourceRefreshResult, SuccessfulRefresh
from src.models.competitor import ChangeDetectionState, CompetitorSource, ScrapeResult
from src.models.scrape_run import ScrapeRun, ScrapeRunStatus
from src.scraping.extractors.base import BaseExtractor
from src.scraping.extractors.registry import create_extractor, list_sources
from src.scraping.fetcher.cache_fetcher import create_http_client

log = structlog.get_logger()

SkipReason = Literal["min_interval", "locked"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CompetitorRefreshService:
    def __init__(
        self,
        pool: asyncpg.Pool,
        *,
        settings: Settings | None = None,
        extractors: Mapping[CompetitorSource, BaseExtractor] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.pool = pool
        self.settings = settings or get_settings()
        self.extractors = extractors
        self.clock = clock

    @property
    def min_interval(self) -> timedelta:
        return timedelta(hours=self.settings.min_refresh_interval_hours)

    def skip_reason(
        self, last_run: ScrapeRun | None, now: datetime, force: bool
    ) -> SkipReason | None:
        """Decide whether a source must be skipped. ``force`` bypasses both checks."""
        if force or last_run is None:
            return None
        if last_run.finished_at and now - last_run.finished_at < self.min_interval:
            return "min_interval"
        if last_run.is_locked(now):
            return "locked"
        return None

    async def refresh(
        self, *, force: bool = False, nocache: bool = False
    ) -> dict[str, SourceRefreshResult]:
        """Refresh every registered source sequentially.

        Failures of one source are reported inline and never stop the others.
        """
        results: dict[str, SourceRefreshResult] = {}
        client = None
        extractors = self.extractors
        if extractors is None:
            client = create_http_client()
            extractors = {source: create_extractor(source, client) for source in list_sources()}

        try:
            for source, extractor in extractors.items():
                results[source.value] = await self.refresh_source(
                    source, extractor, force=force, nocache=nocache
                )
        finally:
            if client is not None:
                await client.aclose()

        return results

    async def refresh_source(
        self,
        source: CompetitorSource,
        extractor: BaseExtractor,
        *,
        force: bool = False,
        nocache: bool = False,
    ) -> SourceRefreshResult:
        now = self.clock()

        async with run_queries.source_lock(self.pool, source) as conn:
            last_run = await run_queries.get_last_scrape_run(conn, source)
            reason = self.skip_reason(last_run, now, force)
            if reason:
                log.info("scrape_run_skipped", source=source.value, reason=reason)
                return SkippedRefresh(reason=reason)

            last_success = await run_queries.get_last_successful_scrape_run(conn, source)
            run = await run_queries.create_scrape_run(
                conn, source, self.settings.scrape_lock_minutes, now=now
            )

        prior = None
        if not nocache and last_success is not None:
            prior = ChangeDetectionState.from_result(last_success.result)

        log.info(
            "scrape_run_started",
            source=source.value,
            run_id=str(run.id),
            force=force,
            nocache=nocache,
            has_prior=prior is not None,
        )

        try:
            result = await extractor.extract(prior)
            if result.meta.used_cache and last_success and last_success.result:
                result.meta.item_count = last_success.result.get("item_count", 0)

            inserted = 0
            if result.items:
                inserted = await price_queries.insert_prices(self.pool, result.items)

            await run_queries.finish_scrape_run(
                self.pool,
                run.id,
                ScrapeRunStatus.SUCCESS,
                result=result.meta.model_dump(mode="json"),
                now=self.clock(),
            )
        except Exception as e:
            message = str(e) or e.__class__.__name__
            log.exception("scrape_run_failed", source=source.value, run_id=str(run.id))
            await run_queries.finish_scrape_run(
                self.pool, run.id, ScrapeRunStatus.FAILED, error=message, now=self.clock()
            )
            return FailedRefresh(error=message)

        self.check_yield(source, result, last_success)
        log.info(
            "scrape_run_succeeded",
            source=source.value,
            run_id=str(run.id),
            items=len(result.items),
            inserted=inserted,
            used_cache=result.meta.used_cache,
        )
        return SuccessfulRefresh(inserted=inserted, meta=result.meta)

    def check_yield(
        self,
        source: CompetitorSource,
        result: ScrapeResult,
        last_success: ScrapeRun | None,
    ) -> bool:
        """Warn when a changed document yields far fewer items than before.

        Returns True when the yield looks healthy. Never affects the run outcome.
        """
        if result.meta.used_cache:
            return True

        previous = 0
        if last_success and last_success.result:
            previous = int(last_success.result.get("item_count") or 0)

        current = len(result.items)
        if current == 0 or (previous and current < previous * self.settings.min_yield_ratio):
            log.warning(
                "low_yield_detected",
                source=source.value,
                items=current,
                previous_items=previous,
                url=result.meta.url,
            )
            return False
        return True
