"""HTTP request/response transport for the controller's JSON API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pygrowbox._constants import USER_AGENT
from pygrowbox.config import GrowboxConfig
from pygrowbox.exceptions import GrowboxTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpReply:
    """Status and decoded body of a request that reached the server.

    ``body`` is ``None`` when the response text was not valid JSON.
    """

    status: int
    body: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by the ingestion and control layers.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any: ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> HttpReply: ...


class HttpTransport:
    """aiohttp-backed transport for the controller endpoints."""

    def __init__(self, config: GrowboxConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = (
            aiohttp.ClientTimeout(total=config.request_timeout) if config.request_timeout is not None else None
        )

    def _request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": {"accept": "application/json", "user-agent": USER_AGENT}}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        return kwargs

    async def get_json(self, endpoint: str) -> Any:
        """GET *endpoint* and return its decoded JSON body.

        Raises
        ------
        GrowboxTransportError
            On network failure, a non-200 status, or a body that is not JSON.
        """
        url = self._config.url(endpoint)
        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, **self._request_kwargs()) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise GrowboxTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except GrowboxTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise GrowboxTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise GrowboxTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=200,
                endpoint=endpoint,
            ) from exc

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> HttpReply:
        """POST *payload* as JSON and return the reply whatever its status.

        Raises
        ------
        GrowboxTransportError
            Only when the request never produced a response.
        """
        url = self._config.url(endpoint)
        body = json.dumps(dict(payload), separators=(",", ":"))
        kwargs = self._request_kwargs()
        kwargs["headers"]["content-type"] = "application/json"

        _logger.debug("POST %s body=%s", url, body)

        try:
            async with self._http.post(url, data=body, **kwargs) as resp:
                text = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise GrowboxTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        try:
            decoded: Any = json.loads(text)
        except json.JSONDecodeError:
            _logger.debug("Non-JSON reply from %s (HTTP %s): %s", endpoint, status, text[:200])
            decoded = None
        return HttpReply(status=status, body=decoded, text=text)
