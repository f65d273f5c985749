"""View reconciler.

This is the only component allowed to write displayed dashboard state.
Bootstrap fetches and push events both arrive here as whole snapshots;
each kind is replaced wholesale, last write wins, so any interleaving of
the two sources produces the same result as applying the final snapshot
of each kind.

Editable target fields follow a per-field "first touch wins" rule: once
the operator has typed into a field, no snapshot overwrites it for the
rest of the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from pygrowbox._constants import (
    ERROR_SENTINEL,
    HUMIDIFIER_OFF_TEXT,
    HUMIDIFIER_ON_TEXT,
    HUMIDITY_DECIMALS,
    LIGHT_OFF_TEXT,
    LIGHT_ON_TEXT,
    TEMPERATURE_DECIMALS,
    VPD_DECIMALS,
)
from pygrowbox.models.sensors import SensorSnapshot
from pygrowbox.models.status import DeviceStatusSnapshot
from pygrowbox.state.events import SnapshotKind, SnapshotRecord, SnapshotSource
from pygrowbox.state.form import (
    EditableField,
    FieldEditState,
    FormField,
    initial_form,
    prefill_form,
    touch_field,
)

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def format_reading(value: float | None, decimals: int) -> str:
    """Format a reading with fixed precision, or the error sentinel for ``None``."""
    if value is None:
        return ERROR_SENTINEL
    return f"{value:.{decimals}f}"


class SensorView(BaseModel):
    """Formatted sensor readings; every metric shows the error sentinel until a snapshot arrives."""

    model_config = ConfigDict(frozen=True)

    temperature: str = ERROR_SENTINEL
    air_humidity: str = ERROR_SENTINEL
    soil_humidity: str = ERROR_SENTINEL
    vpd: str = ERROR_SENTINEL


class StatusView(BaseModel):
    model_config = ConfigDict(frozen=True)

    light_status: str
    light_on_time: str
    light_off_time: str
    humidifier_status: str
    current_target_air_humidity: str


class DashboardView(BaseModel):
    """Everything the render layer shows, as one immutable value."""

    model_config = ConfigDict(frozen=True)

    sensors: SensorView = Field(default_factory=SensorView)
    status: StatusView | None = None
    form: dict[EditableField, FormField] = Field(default_factory=initial_form)


def render_sensor_view(snapshot: SensorSnapshot) -> SensorView:
    return SensorView(
        temperature=format_reading(snapshot.temperature, TEMPERATURE_DECIMALS),
        air_humidity=format_reading(snapshot.air_humidity, HUMIDITY_DECIMALS),
        soil_humidity=format_reading(snapshot.soil_humidity, HUMIDITY_DECIMALS),
        vpd=format_reading(snapshot.vpd, VPD_DECIMALS),
    )


def render_status_view(snapshot: DeviceStatusSnapshot) -> StatusView:
    return StatusView(
        light_status=LIGHT_ON_TEXT if snapshot.light.is_on else LIGHT_OFF_TEXT,
        light_on_time=snapshot.light.on_time,
        light_off_time=snapshot.light.off_time,
        humidifier_status=HUMIDIFIER_ON_TEXT if snapshot.humidifier.is_on else HUMIDIFIER_OFF_TEXT,
        current_target_air_humidity=format_reading(snapshot.humidifier.target_air_humidity, HUMIDITY_DECIMALS),
    )


def status_form_values(snapshot: DeviceStatusSnapshot) -> dict[EditableField, str]:
    """Server values the editable target fields default to."""
    return {
        EditableField.TARGET_AIR_HUMIDITY: format_reading(snapshot.humidifier.target_air_humidity, HUMIDITY_DECIMALS),
        EditableField.LIGHT_ON_TIME: snapshot.light.on_time,
        EditableField.LIGHT_OFF_TIME: snapshot.light.off_time,
    }


class Renderer(Protocol):
    """Render side effect invoked after every merge."""

    def render_sensors(self, view: SensorView) -> None: ...

    def render_status(self, view: StatusView) -> None: ...

    def render_form(self, form: dict[EditableField, FormField]) -> None: ...


class LoggingRenderer:
    """Default renderer: emits the rendered values as DEBUG log records."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def render_sensors(self, view: SensorView) -> None:
        self._logger.debug(
            "Sensors temperature=%s air_humidity=%s soil_humidity=%s vpd=%s",
            view.temperature,
            view.air_humidity,
            view.soil_humidity,
            view.vpd,
        )

    def render_status(self, view: StatusView) -> None:
        self._logger.debug(
            "Status light=%s (%s-%s) humidifier=%s target=%s",
            view.light_status,
            view.light_on_time,
            view.light_off_time,
            view.humidifier_status,
            view.current_target_air_humidity,
        )

    def render_form(self, form: dict[EditableField, FormField]) -> None:
        self._logger.debug(
            "Form %s",
            {field.value: (slot.value, slot.state.value) for field, slot in form.items()},
        )


class ViewReconciler:
    """Single writer of the dashboard view.

    Exposes the two snapshot entry points, the operator input entry point
    and read accessors. Merging is pure; ``renderer`` is called afterwards
    and its failures never affect the stored state.
    """

    def __init__(
        self,
        *,
        renderer: Renderer | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._renderer: Renderer = renderer if renderer is not None else LoggingRenderer()
        self._clock = clock
        self._view = DashboardView()
        self._sensor_snapshot: SensorSnapshot | None = None
        self._status_snapshot: DeviceStatusSnapshot | None = None
        self._records: dict[SnapshotKind, SnapshotRecord] = {}

    # ------------------------------------------------------------------
    # Update entry points
    # ------------------------------------------------------------------

    def apply_sensor_snapshot(
        self,
        snapshot: SensorSnapshot,
        *,
        source: SnapshotSource = SnapshotSource.PUSH,
    ) -> None:
        """Replace the rendered sensor values with *snapshot*."""
        sensors = render_sensor_view(snapshot)
        self._view = self._view.model_copy(update={"sensors": sensors})
        self._sensor_snapshot = snapshot
        self._record(SnapshotKind.SENSORS, source)
        self._render(self._renderer.render_sensors, sensors)

    def apply_status_snapshot(
        self,
        snapshot: DeviceStatusSnapshot,
        *,
        source: SnapshotSource = SnapshotSource.PUSH,
    ) -> None:
        """Replace the status display and prefill untouched target fields."""
        status = render_status_view(snapshot)
        form = prefill_form(self._view.form, status_form_values(snapshot))
        self._view = self._view.model_copy(update={"status": status, "form": form})
        self._status_snapshot = snapshot
        self._record(SnapshotKind.STATUS, source)
        self._render(self._renderer.render_status, status)
        self._render(self._renderer.render_form, dict(form))

    def record_operator_input(self, field: EditableField, value: str) -> None:
        """Store operator input for *field* and mark it touched."""
        field = EditableField(field)
        form = touch_field(self._view.form, field, value)
        self._view = self._view.model_copy(update={"form": form})
        _logger.debug("Operator input field=%s", field.value)
        self._render(self._renderer.render_form, dict(form))

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def view(self) -> DashboardView:
        return self._view

    @property
    def sensors(self) -> SensorView:
        return self._view.sensors

    @property
    def status(self) -> StatusView | None:
        return self._view.status

    @property
    def latest_sensor_snapshot(self) -> SensorSnapshot | None:
        return self._sensor_snapshot

    @property
    def latest_status_snapshot(self) -> DeviceStatusSnapshot | None:
        return self._status_snapshot

    def field_value(self, field: EditableField) -> str:
        return self._view.form[EditableField(field)].value

    def field_state(self, field: EditableField) -> FieldEditState:
        return self._view.form[EditableField(field)].state

    def is_touched(self, field: EditableField) -> bool:
        return self.field_state(field) == FieldEditState.TOUCHED

    def form_values(self) -> dict[EditableField, str]:
        return {field: slot.value for field, slot in self._view.form.items()}

    def record_for(self, kind: SnapshotKind) -> SnapshotRecord | None:
        """Where the latest snapshot of *kind* came from, if one was applied."""
        return self._records.get(kind)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record(self, kind: SnapshotKind, source: SnapshotSource) -> None:
        self._records[kind] = SnapshotRecord(kind=kind, source=source, observed_at=self._clock())
        _logger.debug("Applied %s snapshot from %s", kind.value, source.value)

    def _render(self, fn: Callable[..., None], *args: object) -> None:
        try:
            fn(*args)
        except Exception:
            _logger.warning("Renderer %s failed", getattr(fn, "__name__", fn), exc_info=True)
