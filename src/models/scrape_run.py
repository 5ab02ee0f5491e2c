from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from src.models.competitor import CompetitorSource


class ScrapeRunStatus(StrEnum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class ScrapeRun(BaseModel):
    id: UUID
    source: CompetitorSource
    status: ScrapeRunStatus
    started_at: datetime
    finished_at: datetime | None = None
    lock_expires_at: datetime | None = None
    result: dict[str, Any] | None = None
    error: str | None = None

    def is_locked(self, now: datetime) -> bool:
        """A running row only holds the lock until its expiry passes."""
        return (
            self.status == ScrapeRunStatus.RUNNING
            and self.lock_expires_at is not None
            and self.lock_expires_at > now
        )
