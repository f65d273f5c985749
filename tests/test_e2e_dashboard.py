"""End-to-end dashboard session against an in-process fake controller."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest
from aiohttp import test_utils, web

from pygrowbox.client import GrowboxDashboard
from pygrowbox.config import GrowboxConfig
from pygrowbox.exceptions import GrowboxSessionError
from pygrowbox.models import Feedback, FeedbackKind
from pygrowbox.state.form import EditableField


@dataclass
class FakeController:
    sensors_fail: bool = False
    light_on: bool = True
    on_time: str = "08:00"
    off_time: str = "20:00"
    target: float = 55.0
    calls: dict[str, int] = field(default_factory=dict)
    posted: list[dict[str, Any]] = field(default_factory=list)
    streams: list[web.StreamResponse] = field(default_factory=list)
    stream_open: asyncio.Event = field(default_factory=asyncio.Event)

    def _record_call(self, endpoint: str) -> None:
        self.calls[endpoint] = self.calls.get(endpoint, 0) + 1

    def status_body(self) -> dict[str, Any]:
        return {
            "light": {"isOn": self.light_on, "onTime": self.on_time, "offTime": self.off_time},
            "humidifier": {"isOn": False, "targetAirHumidity": self.target},
        }

    async def sensors(self, _request: web.Request) -> web.Response:
        self._record_call("/api/sensors")
        if self.sensors_fail:
            return web.json_response({"error": "SensorManager not available"}, status=500)
        return web.json_response({"temperature": 24.0, "airHumidity": 60.0, "soilHumidity": 40.0, "vpd": 1.2})

    async def status(self, _request: web.Request) -> web.Response:
        self._record_call("/api/status")
        return web.json_response(self.status_body())

    async def targets(self, request: web.Request) -> web.Response:
        self._record_call("/api/targets")
        body = await request.json()
        self.posted.append(body)
        self.target = float(body["targetAirHumidity"])
        self.on_time = body["lightOnTime"]
        self.off_time = body["lightOffTime"]
        return web.json_response({"success": True, "message": "Alvos atualizados"})

    async def events(self, request: web.Request) -> web.StreamResponse:
        self._record_call("/events")
        resp = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
        await resp.prepare(request)
        self.streams.append(resp)
        self.stream_open.set()
        try:
            while True:
                await asyncio.sleep(0.05)
                # Keep-alive comment; fails once the client has gone away.
                await resp.write(b": ping\n\n")
        except (ConnectionResetError, asyncio.CancelledError):
            pass
        return resp

    async def push(self, event: str, payload: dict[str, Any]) -> None:
        data = json.dumps(payload)
        await self.streams[-1].write(f"event: {event}\ndata: {data}\n\n".encode())

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/sensors", self.sensors)
        app.router.add_get("/api/status", self.status)
        app.router.add_post("/api/targets", self.targets)
        app.router.add_get("/events", self.events)
        return app


async def _wait_for(predicate: Any, timeout: float = 5.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout)


@pytest.mark.asyncio
async def test_dashboard_requires_context_manager() -> None:
    dashboard = GrowboxDashboard(GrowboxConfig())
    with pytest.raises(GrowboxSessionError):
        await dashboard.start()
    with pytest.raises(GrowboxSessionError):
        await dashboard.submit_targets()


@pytest.mark.asyncio
async def test_sensor_bootstrap_failure_status_prefill_and_push_recovery() -> None:
    backend = FakeController(sensors_fail=True)

    async with test_utils.TestServer(backend.app()) as server, aiohttp.ClientSession() as http:
        config = GrowboxConfig(base_url=str(server.make_url("/")), reconnect_delay=0.05)
        async with GrowboxDashboard(config, session=http) as dashboard:
            outcome = await dashboard.start()
            assert dashboard.is_live

            assert not outcome.sensors_ok
            assert outcome.status_ok
            sensors = dashboard.view.sensors
            assert (sensors.temperature, sensors.air_humidity, sensors.soil_humidity, sensors.vpd) == ("ERR", "ERR", "ERR", "ERR")
            assert dashboard.reconciler.form_values() == {
                EditableField.TARGET_AIR_HUMIDITY: "55.0",
                EditableField.LIGHT_ON_TIME: "08:00",
                EditableField.LIGHT_OFF_TIME: "20:00",
            }

            await asyncio.wait_for(backend.stream_open.wait(), 5.0)
            await backend.push(
                "sensor_update",
                {"temperature": 21.0, "airHumidity": 55.5, "soilHumidity": 38.0, "vpd": None},
            )
            await _wait_for(lambda: dashboard.view.sensors.temperature != "ERR")

            sensors = dashboard.view.sensors
            assert sensors.temperature == "21.0"
            assert sensors.vpd == "ERR"

        assert not dashboard.is_live
        # The injected session belongs to the caller.
        assert not http.closed


@pytest.mark.asyncio
async def test_touched_field_kept_while_untouched_fields_follow_push() -> None:
    backend = FakeController()
    feedback_log: list[Feedback | None] = []

    async with test_utils.TestServer(backend.app()) as server, aiohttp.ClientSession() as http:
        config = GrowboxConfig(base_url=str(server.make_url("/")))
        async with GrowboxDashboard(config, session=http, on_feedback=feedback_log.append) as dashboard:
            await dashboard.start()
            await asyncio.wait_for(backend.stream_open.wait(), 5.0)

            dashboard.record_input(EditableField.LIGHT_ON_TIME, "07:00")
            dashboard.record_input(EditableField.TARGET_AIR_HUMIDITY, "60")

            feedback = await dashboard.submit_targets()
            assert feedback == Feedback(kind=FeedbackKind.SUCCESS, message="Alvos atualizados")
            assert dashboard.feedback == feedback
            assert backend.posted == [{"targetAirHumidity": 60.0, "lightOnTime": "07:00", "lightOffTime": "20:00"}]

            backend.on_time = "09:00"
            backend.off_time = "21:00"
            await backend.push("status_update", backend.status_body())
            await _wait_for(lambda: dashboard.view.status is not None and dashboard.view.status.light_off_time == "21:00")

            reconciler = dashboard.reconciler
            assert reconciler.field_value(EditableField.LIGHT_ON_TIME) == "07:00"
            assert reconciler.field_value(EditableField.TARGET_AIR_HUMIDITY) == "60"
            assert reconciler.field_value(EditableField.LIGHT_OFF_TIME) == "21:00"
            assert reconciler.status is not None
            assert reconciler.status.light_on_time == "09:00"
            assert reconciler.status.current_target_air_humidity == "60.0"

            # A malformed push costs one message, not the stream.
            await backend.streams[-1].write(b"event: status_update\ndata: {oops\n\n")
            backend.light_on = False
            await backend.push("status_update", backend.status_body())
            await _wait_for(lambda: reconciler.status is not None and reconciler.status.light_status == "Desligada")

    assert feedback_log[:2] == [None, feedback]
