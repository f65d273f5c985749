"""Target update request/response models for ``POST /api/targets``."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pygrowbox.models._base import GrowboxBaseModel

__all__ = ["Feedback", "FeedbackKind", "TargetUpdateRequest", "TargetUpdateResult"]


class TargetUpdateRequest(GrowboxBaseModel):
    """Operator-entered control targets.

    Only the humidity is parsed client-side; the controller is the
    authority on ranges and time formats.
    """

    target_air_humidity: float
    light_on_time: str
    light_off_time: str


class TargetUpdateResult(GrowboxBaseModel):
    """Server reply to a target update."""

    success: bool
    message: str | None = None


class FeedbackKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


class Feedback(BaseModel):
    """Transient message shown after a submission."""

    model_config = ConfigDict(frozen=True)

    kind: FeedbackKind
    message: str

    @property
    def is_error(self) -> bool:
        return self.kind == FeedbackKind.ERROR
