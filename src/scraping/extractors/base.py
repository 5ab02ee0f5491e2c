from abc import ABC, abstractmethod
from datetime import UTC, datetime

import httpx
import structlog

from src.config.constants import DEFAULT_CURRENCY
from src.models.competitor import (
    ChangeDetectionState,
    CompetitorPriceRecord,
    CompetitorSource,
    ScrapeMeta,
    ScrapeResult,
    ServiceCategory,
)


class BaseExtractor(ABC):
    """One competitor source: fetch its document and turn it into price records."""

    source: CompetitorSource

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.log = structlog.get_logger().bind(
            extractor=self.__class__.__name__, source=self.source.value
        )

    @abstractmethod
    async def extract(self, prior: ChangeDetectionState | None = None) -> ScrapeResult: ...

    def not_modified_result(
        self,
        url: str,
        *,
        etag: str | None,
        last_modified: str | None,
        prior: ChangeDetectionState | None,
    ) -> ScrapeResult:
        """Empty result for a 304, carrying the prior content hash forward."""
        self.log.info("source_not_modified", url=url)
        return ScrapeResult(
            source=self.source,
            meta=ScrapeMeta(
                url=url,
                etag=etag,
                last_modified=last_modified,
                content_hash=prior.content_hash if prior else None,
                fetched_at=datetime.now(UTC),
                used_cache=True,
            ),
            items=[],
        )

    def build_record(
        self,
        service_name: str,
        price: float,
        category: ServiceCategory,
        *,
        content_hash: str | None,
        captured_at: datetime,
    ) -> CompetitorPriceRecord | None:
        if not service_name or price <= 0:
            return None
        return CompetitorPriceRecord(
            source=self.source,
            service_name=service_name,
            category=category,
            price=price,
            currency=DEFAULT_CURRENCY,
            captured_at=captured_at,
            content_hash=content_hash,
        )
