"""Data models for grow-box controller payloads."""

from pygrowbox.models._base import GrowboxBaseModel
from pygrowbox.models.sensors import SensorSnapshot
from pygrowbox.models.status import DeviceStatusSnapshot, HumidifierStatus, LightStatus
from pygrowbox.models.targets import Feedback, FeedbackKind, TargetUpdateRequest, TargetUpdateResult

__all__ = [
    "DeviceStatusSnapshot",
    "Feedback",
    "FeedbackKind",
    "GrowboxBaseModel",
    "HumidifierStatus",
    "LightStatus",
    "SensorSnapshot",
    "TargetUpdateRequest",
    "TargetUpdateResult",
]
