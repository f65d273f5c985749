"""Snapshot bookkeeping types.

Both ingestion paths (bootstrap and push) hand whole snapshots to the
reconciler; these types record where the latest one of each kind came
from. They are diagnostic only and never influence the merge.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SnapshotSource(StrEnum):
    BOOTSTRAP = "bootstrap"
    PUSH = "push"


class SnapshotKind(StrEnum):
    SENSORS = "sensors"
    STATUS = "status"


class SnapshotRecord(BaseModel):
    """Origin of the most recently applied snapshot of one kind."""

    model_config = ConfigDict(frozen=True)

    kind: SnapshotKind
    source: SnapshotSource
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
