import hashlib

import httpx
import structlog

from src.config.settings import get_settings
from src.models.competitor import CacheFetchResult, ChangeDetectionState
from src.utils.errors import FetchError

log = structlog.get_logger()


def compute_content_hash(content: str | bytes) -> str:
    """SHA-256 hex digest of a document; text is hashed as UTF-8."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def conditional_headers(
    user_agent: str, prior: ChangeDetectionState | None = None
) -> dict[str, str]:
    headers = {"User-Agent": user_agent}
    if prior and prior.etag:
        headers["If-None-Match"] = prior.etag
    if prior and prior.last_modified:
        headers["If-Modified-Since"] = prior.last_modified
    return headers


def create_http_client() -> httpx.AsyncClient:
    settings = get_settings()
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.fetch_timeout_seconds),
        headers={"User-Agent": settings.scraper_user_agent},
    )


class CacheAwareFetcher:
    """Conditional GET using ETag/Last-Modified validators.

    No retries happen here; network failures and non-2xx responses raise
    ``FetchError`` for the caller to account for.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.user_agent = get_settings().scraper_user_agent
        self._client = client

    async def fetch(
        self, url: str, prior: ChangeDetectionState | None = None
    ) -> CacheFetchResult:
        headers = conditional_headers(self.user_agent, prior)

        try:
            response = await self._client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e

        etag = response.headers.get("etag")
        last_modified = response.headers.get("last-modified")

        if response.status_code == 304:
            log.info("competitor_fetch_not_modified", url=url)
            return CacheFetchResult(
                status_code=304,
                etag=etag or (prior.etag if prior else None),
                last_modified=last_modified or (prior.last_modified if prior else None),
            )

        if not response.is_success:
            raise FetchError(
                f"HTTP {response.status_code} fetching {url}",
                status_code=response.status_code,
                url=url,
            )

        text = response.text
        return CacheFetchResult(
            status_code=response.status_code,
            content=text,
            etag=etag,
            last_modified=last_modified,
            content_hash=compute_content_hash(text),
        )
