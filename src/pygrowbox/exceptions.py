"""Custom exception hierarchy for pygrowbox."""

from __future__ import annotations


class GrowboxError(Exception):
    """Base exception for all pygrowbox errors."""


class GrowboxConfigError(GrowboxError):
    """Invalid or missing configuration."""


class GrowboxSessionError(GrowboxError):
    """Dashboard used before ``async with`` entered it (or after it exited)."""


class GrowboxTransportError(GrowboxError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class GrowboxPayloadError(GrowboxError):
    """A response or push payload did not decode into its model.

    ``event`` names the push event kind (or the endpoint for
    request/response payloads) the payload belonged to.
    """

    def __init__(self, message: str, *, event: str = "") -> None:
        self.event = event
        super().__init__(message)
