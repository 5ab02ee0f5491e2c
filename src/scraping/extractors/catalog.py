from datetime import UTC, datetime

import httpx

from src.config.constants import CATALOG_URL
from src.models.competitor import (
    ChangeDetectionState,
    CompetitorPriceRecord,
    CompetitorSource,
    ScrapeMeta,
    ScrapeResult,
)
from src.scraping.extractors.base import BaseExtractor
from src.scraping.fetcher.cache_fetcher import CacheAwareFetcher, compute_content_hash
from src.scraping.parser.catalog_parser import CatalogPriceParser
from src.scraping.parser.normalize import categorize_service


class CatalogExtractor(BaseExtractor):
    """HTML services page with prices embedded in free text."""

    source = CompetitorSource.CERINI

    def __init__(self, client: httpx.AsyncClient, url: str = CATALOG_URL):
        super().__init__(client)
        self.url = url
        self.fetcher = CacheAwareFetcher(client)

    async def extract(self, prior: ChangeDetectionState | None = None) -> ScrapeResult:
        res = await self.fetcher.fetch(self.url, prior)

        if res.not_modified:
            return self.not_modified_result(
                self.url, etag=res.etag, last_modified=res.last_modified, prior=prior
            )

        html = res.content or ""
        content_hash = res.content_hash or compute_content_hash(html)
        captured_at = datetime.now(UTC)

        items: list[CompetitorPriceRecord] = []
        for entry in CatalogPriceParser(html).extract_entries():
            record = self.build_record(
                entry.service_name,
                entry.price,
                categorize_service(entry.service_name),
                content_hash=content_hash,
                captured_at=captured_at,
            )
            if record:
                items.append(record)

        self.log.info("catalog_extracted", url=self.url, items=len(items))

        return ScrapeResult(
            source=self.source,
            meta=ScrapeMeta(
                url=self.url,
                etag=res.etag,
                last_modified=res.last_modified,
                content_hash=content_hash,
                fetched_at=datetime.now(UTC),
                used_cache=False,
                item_count=len(items),
            ),
            items=items,
        )
