from typing import Annotated, Literal

from pydantic import BaseModel, Field

from src.models.competitor import CompetitorPriceRecord, ScrapeMeta


class SkippedRefresh(BaseModel):
    status: Literal["skipped"] = "skipped"
    reason: Literal["min_interval", "locked"]


class SuccessfulRefresh(BaseModel):
    status: Literal["success"] = "success"
    inserted: int
    meta: ScrapeMeta


class FailedRefresh(BaseModel):
    status: Literal["failed"] = "failed"
    error: str


SourceRefreshResult = Annotated[
    SkippedRefresh | SuccessfulRefresh | FailedRefresh,
    Field(discriminator="status"),
]


class RefreshResponse(BaseModel):
    results: dict[str, SourceRefreshResult]


LatestPricesResponse = dict[str, list[CompetitorPriceRecord]]


class HealthResponse(BaseModel):
    status: str
    database: str
