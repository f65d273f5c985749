"""Initial snapshot fetches.

Two independent GETs run concurrently. Each one that succeeds is handed
to the reconciler; each one that fails is logged and dropped, leaving
whatever is already rendered untouched. There is no retry: the push
channel is what eventually brings a failed kind up to date.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from pygrowbox._transport import Transport
from pygrowbox.config import GrowboxConfig
from pygrowbox.exceptions import GrowboxPayloadError, GrowboxTransportError
from pygrowbox.models._base import GrowboxBaseModel
from pygrowbox.models.sensors import SensorSnapshot
from pygrowbox.models.status import DeviceStatusSnapshot
from pygrowbox.state.events import SnapshotSource
from pygrowbox.state.reconciler import ViewReconciler

_logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=GrowboxBaseModel)


@dataclass(frozen=True)
class BootstrapOutcome:
    sensors_ok: bool
    status_ok: bool

    @property
    def complete(self) -> bool:
        return self.sensors_ok and self.status_ok


async def fetch_snapshot(transport: Transport, endpoint: str, model: type[TModel]) -> TModel:
    """GET *endpoint* and decode it as *model*."""
    body = await transport.get_json(endpoint)
    return model.from_payload(body, event=endpoint)


class BootstrapLoader:
    def __init__(self, *, config: GrowboxConfig, transport: Transport, reconciler: ViewReconciler) -> None:
        self._config = config
        self._transport = transport
        self._reconciler = reconciler

    async def load(self) -> BootstrapOutcome:
        """Fetch both snapshots and forward whichever arrive."""
        sensors_ok, status_ok = await asyncio.gather(
            self._load_one(
                self._config.sensors_path,
                SensorSnapshot,
                self._reconciler.apply_sensor_snapshot,
            ),
            self._load_one(
                self._config.status_path,
                DeviceStatusSnapshot,
                self._reconciler.apply_status_snapshot,
            ),
        )
        outcome = BootstrapOutcome(sensors_ok=sensors_ok, status_ok=status_ok)
        _logger.debug("Bootstrap finished sensors_ok=%s status_ok=%s", sensors_ok, status_ok)
        return outcome

    async def _load_one(
        self,
        endpoint: str,
        model: type[TModel],
        apply: Callable[..., None],
    ) -> bool:
        try:
            snapshot = await fetch_snapshot(self._transport, endpoint, model)
        except GrowboxTransportError as exc:
            _logger.warning("Error fetching %s: %s", endpoint, exc)
            return False
        except GrowboxPayloadError as exc:
            _logger.warning("Discarding malformed %s response: %s", endpoint, exc)
            return False

        apply(snapshot, source=SnapshotSource.BOOTSTRAP)
        return True
