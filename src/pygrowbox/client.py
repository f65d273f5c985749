"""High-level async dashboard session for the grow-box controller."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pygrowbox._transport import HttpTransport
from pygrowbox.config import GrowboxConfig
from pygrowbox.control.submission import TargetSubmissionController
from pygrowbox.exceptions import GrowboxSessionError
from pygrowbox.ingestion.bootstrap import BootstrapLoader, BootstrapOutcome
from pygrowbox.ingestion.live import LiveUpdateSubscriber
from pygrowbox.models.targets import Feedback
from pygrowbox.state.form import EditableField
from pygrowbox.state.reconciler import DashboardView, Renderer, ViewReconciler

_logger = logging.getLogger(__name__)


class GrowboxDashboard:
    """Live dashboard session.

    One instance corresponds to one page load: edit state starts fresh
    and lives until the session exits.

    Usage::

        async with GrowboxDashboard(config, renderer=my_renderer) as dashboard:
            await dashboard.start()
            dashboard.record_input(EditableField.LIGHT_ON_TIME, "07:30")
            feedback = await dashboard.submit_targets()
    """

    def __init__(
        self,
        config: GrowboxConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        renderer: Renderer | None = None,
        on_feedback: Callable[[Feedback | None], None] | None = None,
        on_push_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self._config = config if config is not None else GrowboxConfig()
        self._external_session = session is not None
        self._http_session = session
        self._reconciler = ViewReconciler(renderer=renderer)
        self._on_feedback = on_feedback
        self._subscriber = LiveUpdateSubscriber(
            config=self._config,
            reconciler=self._reconciler,
            on_error=on_push_error,
        )
        self._transport: HttpTransport | None = None
        self._controller: TargetSubmissionController | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GrowboxDashboard:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        self._controller = TargetSubmissionController(
            config=self._config,
            transport=self._transport,
            reconciler=self._reconciler,
            on_feedback=self._on_feedback,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._subscriber.stop()
        if self._controller is not None:
            self._controller.cancel_pending_clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._controller = None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def start(self) -> BootstrapOutcome:
        """Open the push channel, then fetch the initial snapshots.

        The stream is opened first so no update published while the
        bootstrap requests are in flight is missed.
        """
        transport = self._require_transport()
        assert self._http_session is not None  # noqa: S101
        self._subscriber.start(self._http_session)
        loader = BootstrapLoader(config=self._config, transport=transport, reconciler=self._reconciler)
        return await loader.load()

    def record_input(self, field: EditableField, value: str) -> None:
        """Forward an operator input event for *field*."""
        self._reconciler.record_operator_input(field, value)

    async def submit_targets(self) -> Feedback:
        """Submit the form's current targets."""
        return await self._require_controller().submit()

    async def stop(self) -> None:
        """Close the push channel (the session stays usable for submissions)."""
        await self._subscriber.stop()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> GrowboxConfig:
        return self._config

    @property
    def reconciler(self) -> ViewReconciler:
        return self._reconciler

    @property
    def view(self) -> DashboardView:
        return self._reconciler.view

    @property
    def feedback(self) -> Feedback | None:
        return self._controller.feedback if self._controller is not None else None

    @property
    def is_live(self) -> bool:
        runtime = self._subscriber.runtime
        return runtime is not None and runtime.is_running

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise GrowboxSessionError("Dashboard not initialized. Use 'async with GrowboxDashboard(...) as dashboard:'")
        return self._transport

    def _require_controller(self) -> TargetSubmissionController:
        if self._controller is None:
            raise GrowboxSessionError("Dashboard not initialized. Use 'async with GrowboxDashboard(...) as dashboard:'")
        return self._controller
