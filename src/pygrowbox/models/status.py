"""Actuator status snapshot.

Mapped from ``GET /api/status`` and the ``status_update`` push event.
"""

from __future__ import annotations

from pygrowbox.models._base import GrowboxBaseModel

__all__ = ["DeviceStatusSnapshot", "HumidifierStatus", "LightStatus"]


class LightStatus(GrowboxBaseModel):
    """Grow light relay state and schedule."""

    is_on: bool
    on_time: str
    """Schedule start, ``HH:MM``."""

    off_time: str
    """Schedule end, ``HH:MM``."""


class HumidifierStatus(GrowboxBaseModel):
    """Humidifier relay state and its air humidity target."""

    is_on: bool
    target_air_humidity: float
    """Target relative air humidity in percent."""


class DeviceStatusSnapshot(GrowboxBaseModel):
    """Status of both actuators, always replaced as a whole."""

    light: LightStatus
    humidifier: HumidifierStatus
