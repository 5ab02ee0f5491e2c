"""Competitor price endpoints: latest prices and refresh trigger."""

import structlog
from fastapi import APIRouter, HTTPException, Query

from src.db.pool import get_pool
from src.db.queries.competitor_prices import get_latest_by_source
from src.models.api import LatestPricesResponse, RefreshResponse
from src.scraping.extractors.registry import list_sources
from src.services.competitor_refresh import CompetitorRefreshService

log = structlog.get_logger()

router = APIRouter(prefix="/competitors", tags=["competitors"])


@router.get("/prices", response_model=LatestPricesResponse)
async def latest_prices() -> LatestPricesResponse:
    """Latest persisted price records for every configured source."""
    try:
        pool = await get_pool()
        return {
            source.value: await get_latest_by_source(pool, source) for source in list_sources()
        }
    except Exception as e:
        log.exception("competitor_prices_read_failed")
        raise HTTPException(status_code=500, detail=str(e) or "Unexpected error")


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_prices(
    force: bool = Query(False, description="Bypass the minimum interval and run lock"),
    nocache: bool = Query(False, description="Ignore stored ETag/Last-Modified validators"),
) -> RefreshResponse:
    """Scrape all sources; per-source failures are reported inline."""
    try:
        pool = await get_pool()
        service = CompetitorRefreshService(pool)
        results = await service.refresh(force=force, nocache=nocache)
    except Exception as e:
        log.exception("competitor_refresh_failed", force=force, nocache=nocache)
        raise HTTPException(status_code=500, detail=str(e) or "Unexpected error")
    return RefreshResponse(results=results)
