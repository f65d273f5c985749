"""Sensor readings snapshot.

Mapped from ``GET /api/sensors`` and the ``sensor_update`` push event.
"""

from __future__ import annotations

from pygrowbox.models._base import GrowboxBaseModel

__all__ = ["SensorSnapshot"]


class SensorSnapshot(GrowboxBaseModel):
    """Latest sensor readings. ``None`` means the read failed."""

    temperature: float | None = None
    """Air temperature in °C."""

    air_humidity: float | None = None
    """Relative air humidity in percent."""

    soil_humidity: float | None = None
    """Soil moisture in percent."""

    vpd: float | None = None
    """Vapor-pressure deficit in kPa, derived on the device."""
