from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class CompetitorSource(StrEnum):
    CERINI = "cerini"
    MALA = "mala"


class ServiceCategory(StrEnum):
    HAIRCUT = "haircut"
    COLOR = "color"
    CHEMICAL_TREATMENT = "chemical-treatment"
    STYLING = "styling"
    TREATMENTS = "treatments"
    OTHER = "other"


class CompetitorPriceRecord(BaseModel):
    source: CompetitorSource
    service_name: str = Field(min_length=1)
    category: ServiceCategory
    price: float = Field(gt=0)
    currency: str
    captured_at: datetime
    content_hash: str | None = None
    observations: str | None = None
    metadata: dict[str, Any] = {}


class ChangeDetectionState(BaseModel):
    """Validators remembered from the previous successful fetch."""

    etag: str | None = None
    last_modified: str | None = None
    content_hash: str | None = None

    @classmethod
    def from_result(cls, result: dict[str, Any] | None) -> "ChangeDetectionState | None":
        if not result:
            return None
        return cls(
            etag=result.get("etag"),
            last_modified=result.get("last_modified"),
            content_hash=result.get("content_hash"),
        )


class CacheFetchResult(BaseModel):
    status_code: int
    content: str | None = None
    etag: str | None = None
    last_modified: str | None = None
    content_hash: str | None = None

    @property
    def not_modified(self) -> bool:
        return self.status_code == 304


class ScrapeMeta(BaseModel):
    url: str
    etag: str | None = None
    last_modified: str | None = None
    content_hash: str | None = None
    fetched_at: datetime
    used_cache: bool = False
    debug_path: str | None = None
    item_count: int = 0


class ScrapeResult(BaseModel):
    source: CompetitorSource
    meta: ScrapeMeta
    items: list[CompetitorPriceRecord] = []
