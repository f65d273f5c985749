"""Internal Server-Sent Events decoding and runtime helpers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass

import aiohttp

from pygrowbox._constants import DEFAULT_RECONNECT_DELAY, USER_AGENT
from pygrowbox.exceptions import GrowboxTransportError

_DEFAULT_EVENT = "message"


@dataclass(frozen=True)
class SseEvent:
    """A dispatched event-stream message."""

    event: str
    data: str
    last_event_id: str | None = None


class SseDecoder:
    """Incremental ``text/event-stream`` line decoder.

    Feed one line at a time (with or without its line terminator).
    A blank line dispatches the buffered message. The last event id and
    the server-requested ``retry`` survive across messages and across
    :meth:`reset`, as they do for a browser ``EventSource``.
    """

    def __init__(self) -> None:
        self._event = ""
        self._data: list[str] = []
        self._last_event_id: str | None = None
        self._stream_start = True
        self.retry_ms: int | None = None

    @property
    def last_event_id(self) -> str | None:
        return self._last_event_id

    def reset(self) -> None:
        """Drop a partially received message (used when a connection breaks)."""
        self._event = ""
        self._data = []

    def begin_stream(self) -> None:
        """Prepare for a new connection; its first line may carry a byte order mark."""
        self.reset()
        self._stream_start = True

    def feed(self, line: str) -> SseEvent | None:
        line = line.rstrip("\r\n")
        if self._stream_start:
            self._stream_start = False
            line = line.removeprefix("\ufeff")
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None

        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
        elif name == "id":
            if "\0" not in value:
                self._last_event_id = value
        elif name == "retry":
            if value.isascii() and value.isdigit():
                self.retry_ms = int(value)
        return None

    def _dispatch(self) -> SseEvent | None:
        if not self._data:
            self._event = ""
            return None
        event = SseEvent(
            event=self._event or _DEFAULT_EVENT,
            data="\n".join(self._data),
            last_event_id=self._last_event_id,
        )
        self.reset()
        return event


class EventSourceRuntime:
    """asyncio task that keeps an event stream open and emits parsed events.

    Mirrors browser ``EventSource`` behaviour: whenever the stream ends or
    fails, ``on_error`` is told and the connection is re-opened after a
    fixed delay (the server may change it with ``retry:``), sending
    ``Last-Event-ID`` once an id has been seen.
    """

    def __init__(
        self,
        *,
        http_session: aiohttp.ClientSession,
        url: str,
        on_event: Callable[[SseEvent], None],
        on_error: Callable[[Exception], None] | None = None,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http = http_session
        self._url = url
        self._on_event = on_event
        self._on_error = on_error
        self._reconnect_delay = reconnect_delay
        self._logger = logger or logging.getLogger(__name__)
        self._decoder = SseDecoder()
        self._task: asyncio.Task[None] | None = None
        self._connected = False

    @property
    def is_running(self) -> bool:
        """Whether the reconnect loop is active."""
        return self._task is not None and not self._task.done()

    @property
    def is_connected(self) -> bool:
        """Whether a stream response is currently open."""
        return self._connected

    @property
    def reconnect_delay(self) -> float:
        return self._reconnect_delay

    @property
    def last_event_id(self) -> str | None:
        return self._decoder.last_event_id

    def start(self) -> None:
        """Spawn the reading task on the running loop."""
        if self.is_running:
            return
        self._logger.debug("Event stream start requested url=%s", self._url)
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pygrowbox-event-stream")

    async def stop(self) -> None:
        """Cancel the reading task and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._connected = False
        self._logger.debug("Event stream stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self._consume()
                error: Exception = GrowboxTransportError("Event stream closed by server", endpoint=self._url)
            except GrowboxTransportError as exc:
                error = exc
            except (aiohttp.ClientError, TimeoutError) as exc:
                error = GrowboxTransportError(f"Event stream failed: {exc!r}", endpoint=self._url)
                error.__cause__ = exc
            except Exception as exc:
                self._logger.warning("Event stream failed unexpectedly", exc_info=True)
                error = GrowboxTransportError(f"Event stream failed: {exc!r}", endpoint=self._url)
                error.__cause__ = exc
            finally:
                self._connected = False

            self._report_error(error)
            self._logger.debug("Event stream reconnecting in %.1fs", self._reconnect_delay)
            await asyncio.sleep(self._reconnect_delay)

    async def _consume(self) -> None:
        headers = {
            "accept": "text/event-stream",
            "cache-control": "no-cache",
            "user-agent": USER_AGENT,
        }
        if self._decoder.last_event_id:
            headers["last-event-id"] = self._decoder.last_event_id

        timeout = aiohttp.ClientTimeout(total=None, sock_read=None)
        async with self._http.get(self._url, headers=headers, timeout=timeout) as resp:
            if resp.status != 200:
                raise GrowboxTransportError(
                    f"HTTP {resp.status} from event stream",
                    status_code=resp.status,
                    endpoint=self._url,
                )
            self._connected = True
            self._decoder.begin_stream()
            self._logger.debug("Event stream connected url=%s last_event_id=%s", self._url, self.last_event_id)

            async for raw_line in resp.content:
                event = self._decoder.feed(raw_line.decode("utf-8", errors="replace"))
                if self._decoder.retry_ms is not None:
                    self._reconnect_delay = self._decoder.retry_ms / 1000.0
                if event is not None:
                    self._dispatch(event)

    def _dispatch(self, event: SseEvent) -> None:
        try:
            self._on_event(event)
        except Exception:
            self._logger.warning("Event stream listener failed for event=%s", event.event, exc_info=True)

    def _report_error(self, error: Exception) -> None:
        if self._on_error is None:
            self._logger.warning("Event stream error: %s", error)
            return
        try:
            self._on_error(error)
        except Exception:
            self._logger.debug("Event stream error callback failed", exc_info=True)
