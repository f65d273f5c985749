"""Push channel ingestion.

Translates ``sensor_update`` / ``status_update`` stream events into
snapshot models and forwards them to the reconciler. A malformed payload
costs exactly one message; the stream keeps running.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import aiohttp

from pygrowbox._constants import SENSOR_UPDATE_EVENT, STATUS_UPDATE_EVENT
from pygrowbox._sse import EventSourceRuntime, SseEvent
from pygrowbox.config import GrowboxConfig
from pygrowbox.exceptions import GrowboxPayloadError
from pygrowbox.models.sensors import SensorSnapshot
from pygrowbox.models.status import DeviceStatusSnapshot
from pygrowbox.state.events import SnapshotSource
from pygrowbox.state.reconciler import ViewReconciler

_logger = logging.getLogger(__name__)


class LiveUpdateSubscriber:
    def __init__(
        self,
        *,
        config: GrowboxConfig,
        reconciler: ViewReconciler,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self._config = config
        self._reconciler = reconciler
        self._on_error_cb = on_error
        self._runtime: EventSourceRuntime | None = None
        self._dropped = 0

    @property
    def runtime(self) -> EventSourceRuntime | None:
        return self._runtime

    @property
    def dropped_messages(self) -> int:
        """Number of push messages discarded as malformed."""
        return self._dropped

    def start(self, http_session: aiohttp.ClientSession) -> None:
        if self._runtime is not None and self._runtime.is_running:
            return
        runtime = EventSourceRuntime(
            http_session=http_session,
            url=self._config.url(self._config.events_path),
            on_event=self.handle_event,
            on_error=self._on_error,
            reconnect_delay=self._config.reconnect_delay,
            logger=_logger,
        )
        runtime.start()
        self._runtime = runtime

    async def stop(self) -> None:
        runtime = self._runtime
        self._runtime = None
        if runtime is not None:
            await runtime.stop()

    def handle_event(self, event: SseEvent) -> None:
        """Decode one stream event and forward it to the reconciler."""
        _logger.debug("Push event received event=%s id=%s", event.event, event.last_event_id)
        try:
            if event.event == SENSOR_UPDATE_EVENT:
                sensors = SensorSnapshot.from_payload(event.data, event=event.event)
                self._reconciler.apply_sensor_snapshot(sensors, source=SnapshotSource.PUSH)
            elif event.event == STATUS_UPDATE_EVENT:
                status = DeviceStatusSnapshot.from_payload(event.data, event=event.event)
                self._reconciler.apply_status_snapshot(status, source=SnapshotSource.PUSH)
            else:
                _logger.debug("Ignoring push event %s", event.event)
        except GrowboxPayloadError as exc:
            self._dropped += 1
            _logger.warning("Dropping malformed %s message: %s", event.event, exc)

    def _on_error(self, error: Exception) -> None:
        _logger.warning("Push channel error: %s", error)
        if self._on_error_cb is not None:
            try:
                self._on_error_cb(error)
            except Exception:
                _logger.debug("on_error callback failed", exc_info=True)
