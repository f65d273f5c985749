"""Client configuration for pygrowbox."""

from __future__ import annotations

import dataclasses

from pygrowbox._constants import (
    BASE_URL,
    DEFAULT_FEEDBACK_CLEAR_DELAY,
    DEFAULT_RECONNECT_DELAY,
    EVENTS_PATH,
    SENSORS_PATH,
    STATUS_PATH,
    TARGETS_PATH,
)
from pygrowbox.exceptions import GrowboxConfigError


@dataclasses.dataclass(frozen=True)
class GrowboxConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the controller's web server. Defaults to the
        address the device uses in access-point mode.
    sensors_path : str
        Path of the sensors snapshot endpoint.
    status_path : str
        Path of the device status snapshot endpoint.
    targets_path : str
        Path the target update request is posted to.
    events_path : str
        Path of the Server-Sent Events stream.
    request_timeout : float or None
        Total timeout in seconds for request/response calls. ``None``
        keeps aiohttp's default behaviour. The event stream never
        times out on read.
    reconnect_delay : float
        Seconds to wait before re-opening the event stream after it
        drops. A ``retry:`` field sent by the server overrides it.
    feedback_clear_delay : float
        Seconds a submission result stays visible before it is cleared.
    """

    base_url: str = BASE_URL
    sensors_path: str = SENSORS_PATH
    status_path: str = STATUS_PATH
    targets_path: str = TARGETS_PATH
    events_path: str = EVENTS_PATH
    request_timeout: float | None = None
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    feedback_clear_delay: float = DEFAULT_FEEDBACK_CLEAR_DELAY

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise GrowboxConfigError("base_url must be non-empty")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise GrowboxConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.reconnect_delay < 0:
            raise GrowboxConfigError(f"reconnect_delay must be >= 0, got {self.reconnect_delay}")
        if self.feedback_clear_delay < 0:
            raise GrowboxConfigError(f"feedback_clear_delay must be >= 0, got {self.feedback_clear_delay}")

    def url(self, path: str) -> str:
        """Join *path* onto :attr:`base_url`."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
