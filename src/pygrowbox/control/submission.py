"""Target submission.

Reads the operator's current form values through the reconciler, posts
them once, and shows a transient :class:`~pygrowbox.models.Feedback`.
The controller never writes display state: the server's accepted values
come back through the next ``status_update`` push.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from typing import Any, Protocol

from pygrowbox._constants import (
    SUBMIT_COMMUNICATION_FAILURE_MESSAGE,
    SUBMIT_FAILURE_MESSAGE,
    SUBMIT_SUCCESS_MESSAGE,
)
from pygrowbox._transport import HttpReply, Transport
from pygrowbox.config import GrowboxConfig
from pygrowbox.exceptions import GrowboxPayloadError, GrowboxTransportError
from pygrowbox.models.targets import Feedback, FeedbackKind, TargetUpdateRequest, TargetUpdateResult
from pygrowbox.state.form import EditableField
from pygrowbox.state.reconciler import ViewReconciler

_logger = logging.getLogger(__name__)


class _Cancelable(Protocol):
    def cancel(self) -> None: ...


#: ``loop.call_later`` compatible scheduler.
Scheduler = Callable[[float, Callable[[], None]], _Cancelable]


def parse_humidity(text: str) -> float:
    """Parse the humidity field. Raises :class:`ValueError` unless finite."""
    value = float(text.strip())
    if not math.isfinite(value):
        raise ValueError(f"humidity must be a finite number, got {text!r}")
    return value


def feedback_from_reply(reply: HttpReply) -> Feedback:
    """Map a target update reply to the message shown to the operator."""
    if reply.body is None:
        return Feedback(kind=FeedbackKind.ERROR, message=SUBMIT_COMMUNICATION_FAILURE_MESSAGE)
    try:
        result = TargetUpdateResult.from_payload(reply.body, event="targets")
    except GrowboxPayloadError as exc:
        _logger.warning("Unexpected target update reply (HTTP %s): %s", reply.status, exc)
        return Feedback(kind=FeedbackKind.ERROR, message=SUBMIT_COMMUNICATION_FAILURE_MESSAGE)

    if reply.ok and result.success:
        return Feedback(kind=FeedbackKind.SUCCESS, message=result.message or SUBMIT_SUCCESS_MESSAGE)
    return Feedback(kind=FeedbackKind.ERROR, message=result.message or SUBMIT_FAILURE_MESSAGE)


class TargetSubmissionController:
    def __init__(
        self,
        *,
        config: GrowboxConfig,
        transport: Transport,
        reconciler: ViewReconciler,
        on_feedback: Callable[[Feedback | None], None] | None = None,
        call_later: Scheduler | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._reconciler = reconciler
        self._on_feedback = on_feedback
        self._call_later = call_later
        self._clear_handle: _Cancelable | None = None
        self._feedback: Feedback | None = None
        self._generation = 0

    @property
    def feedback(self) -> Feedback | None:
        """Currently displayed feedback, ``None`` once cleared."""
        return self._feedback

    @property
    def has_pending_clear(self) -> bool:
        return self._clear_handle is not None

    def build_request(self) -> TargetUpdateRequest:
        """Build a request from the current form values.

        Raises
        ------
        ValueError
            If the humidity field is not a finite number.
        """
        return TargetUpdateRequest(
            target_air_humidity=parse_humidity(self._reconciler.field_value(EditableField.TARGET_AIR_HUMIDITY)),
            light_on_time=self._reconciler.field_value(EditableField.LIGHT_ON_TIME),
            light_off_time=self._reconciler.field_value(EditableField.LIGHT_OFF_TIME),
        )

    async def submit(self) -> Feedback:
        """Submit the current targets and show the outcome."""
        self._generation += 1
        generation = self._generation
        self.cancel_pending_clear()
        self._publish(None)

        try:
            request = self.build_request()
        except ValueError as exc:
            _logger.warning("Target submission not sent: %s", exc)
            feedback = Feedback(kind=FeedbackKind.ERROR, message=SUBMIT_FAILURE_MESSAGE)
        else:
            feedback = await self._post(request)

        if generation != self._generation:
            # A newer submission owns the feedback slot now.
            _logger.debug("Discarding feedback of superseded submission")
            return feedback

        self._publish(feedback)
        self._schedule_clear()
        return feedback

    def cancel_pending_clear(self) -> None:
        handle = self._clear_handle
        self._clear_handle = None
        if handle is not None:
            handle.cancel()

    async def _post(self, request: TargetUpdateRequest) -> Feedback:
        payload: dict[str, Any] = request.to_payload()
        try:
            reply = await self._transport.post_json(self._config.targets_path, payload)
        except GrowboxTransportError as exc:
            _logger.warning("Error submitting targets: %s", exc)
            return Feedback(kind=FeedbackKind.ERROR, message=SUBMIT_COMMUNICATION_FAILURE_MESSAGE)

        feedback = feedback_from_reply(reply)
        _logger.debug("Target submission HTTP %s -> %s", reply.status, feedback.kind.value)
        return feedback

    def _schedule_clear(self) -> None:
        self.cancel_pending_clear()
        scheduler = self._call_later or asyncio.get_running_loop().call_later
        self._clear_handle = scheduler(self._config.feedback_clear_delay, self._clear)

    def _clear(self) -> None:
        self._clear_handle = None
        self._publish(None)

    def _publish(self, feedback: Feedback | None) -> None:
        self._feedback = feedback
        if self._on_feedback is None:
            return
        try:
            self._on_feedback(feedback)
        except Exception:
            _logger.warning("Feedback callback failed", exc_info=True)
