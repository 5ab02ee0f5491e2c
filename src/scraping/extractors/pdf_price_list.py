"""Extractor for a price list published as a PDF behind a listing page."""

import re
from datetime import UTC, datetime

import httpx

from src.config.constants import DEBUG_TEXT_MAX_CHARS, PRICE_LIST_PAGE_URL, PRICE_LIST_PDF_URL
from src.config.settings import get_settings
from src.models.competitor import (
    ChangeDetectionState,
    CompetitorPriceRecord,
    CompetitorSource,
    ScrapeMeta,
    ScrapeResult,
)
from src.scraping.extractors.base import BaseExtractor
from src.scraping.fetcher.cache_fetcher import compute_content_hash, conditional_headers
from src.scraping.parser.pdf_text import extract_pdf_text
from src.scraping.parser.price_list_parser import parse_price_list, split_lines
from src.utils.debug_dump import write_debug_text
from src.utils.errors import FetchError, NotPdfError
from src.utils.url import resolve_url

_PDF_LINK_PATTERNS = [
    re.compile(r'href\s*=\s*"([^"]+\.pdf)"', re.IGNORECASE),
    re.compile(r'src\s*=\s*"([^"]+\.pdf)"', re.IGNORECASE),
]


def _is_pdf(response: httpx.Response) -> bool:
    return "pdf" in response.headers.get("content-type", "")


class PdfPriceListExtractor(BaseExtractor):
    source = CompetitorSource.MALA

    def __init__(
        self,
        client: httpx.AsyncClient,
        page_url: str = PRICE_LIST_PAGE_URL,
        direct_pdf_url: str = PRICE_LIST_PDF_URL,
    ):
        super().__init__(client)
        self.page_url = page_url
        self.direct_pdf_url = direct_pdf_url

    async def resolve_pdf_url(self) -> str:
        """Find the current PDF location.

        The known direct URL wins if a HEAD says it is a PDF; otherwise the
        listing page is searched for a .pdf link. Falls back to the direct URL.
        """
        try:
            head = await self.client.head(self.direct_pdf_url)
            if head.is_success and _is_pdf(head):
                return self.direct_pdf_url
        except httpx.HTTPError as e:
            self.log.debug("pdf_head_failed", url=self.direct_pdf_url, error=str(e))

        html = ""
        try:
            page = await self.client.get(self.page_url)
            html = page.text
        except httpx.HTTPError as e:
            self.log.warning("price_list_page_failed", url=self.page_url, error=str(e))

        for pattern in _PDF_LINK_PATTERNS:
            match = pattern.search(html)
            if match:
                resolved = resolve_url(match.group(1), self.page_url)
                self.log.info("pdf_url_resolved", url=resolved)
                return resolved

        return self.direct_pdf_url

    async def _get(self, url: str, prior: ChangeDetectionState | None) -> httpx.Response:
        headers = conditional_headers(get_settings().scraper_user_agent, prior)
        try:
            response = await self.client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {url} failed: {e}", source=self.source, url=url) from e

        if response.status_code != 304 and not response.is_success:
            raise FetchError(
                f"HTTP {response.status_code} fetching price list",
                status_code=response.status_code,
                source=self.source,
                url=url,
            )
        return response

    async def extract(self, prior: ChangeDetectionState | None = None) -> ScrapeResult:
        pdf_url = await self.resolve_pdf_url()
        response = await self._get(pdf_url, prior)

        if response.status_code == 304:
            return self.not_modified_result(
                pdf_url,
                etag=response.headers.get("etag") or (prior.etag if prior else None),
                last_modified=response.headers.get("last-modified")
                or (prior.last_modified if prior else None),
                prior=prior,
            )

        if not _is_pdf(response):
            self.log.warning(
                "price_list_not_pdf",
                url=pdf_url,
                content_type=response.headers.get("content-type", ""),
            )
            pdf_url = await self.resolve_pdf_url()
            # Validators are dropped so the retry always carries a body
            response = await self._get(pdf_url, None)
            if not _is_pdf(response):
                raise NotPdfError(
                    "Price list content is not a PDF", source=self.source, url=pdf_url
                )

        pdf_bytes = response.content
        content_hash = compute_content_hash(pdf_bytes)

        text = await extract_pdf_text(pdf_bytes, source=self.source, url=pdf_url)
        timestamp = int(datetime.now(UTC).timestamp() * 1000)
        debug_path = write_debug_text(
            f"{self.source.value}-{timestamp}.txt", text[:DEBUG_TEXT_MAX_CHARS]
        )

        items = self.records_from_text(text, content_hash)
        self.log.info("price_list_extracted", url=pdf_url, items=len(items))

        return ScrapeResult(
            source=self.source,
            meta=ScrapeMeta(
                url=pdf_url,
                etag=response.headers.get("etag"),
                last_modified=response.headers.get("last-modified"),
                content_hash=content_hash,
                fetched_at=datetime.now(UTC),
                used_cache=False,
                debug_path=debug_path or None,
                item_count=len(items),
            ),
            items=items,
        )

    def records_from_text(
        self, text: str, content_hash: str | None
    ) -> list[CompetitorPriceRecord]:
        captured_at = datetime.now(UTC)
        items: list[CompetitorPriceRecord] = []
        for entry in parse_price_list(split_lines(text)):
            record = self.build_record(
                entry.service_name,
                entry.price,
                entry.category,
                content_hash=content_hash,
                captured_at=captured_at,
            )
            if record:
                items.append(record)
        return items
