"""Tests for the FastAPI control surface and the probe server wiring."""

import asyncio

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer as AiohttpServer
import pytest
from fastapi.testclient import TestClient

from waiting_interval.manager import IntervalManager
from waiting_interval.runtime.config import ServerSettings
from waiting_interval.runtime.http_control import HttpControl
from waiting_interval.runtime.probe import UrlProbe
from waiting_interval.runtime.run_server import build_app
from waiting_interval.scheduler import SimClock, SimScheduler


@pytest.fixture
def sim_manager():
    scheduler = SimScheduler(SimClock())
    return scheduler, IntervalManager(scheduler)


def test_list_get_and_stop(sim_manager):
    scheduler, manager = sim_manager
    first = manager.start(lambda: None, [10, 20])
    second = manager.start(lambda: None, [5])
    scheduler.run_for(10)
    client = TestClient(HttpControl(manager).app)

    body = client.get("/intervals").json()
    assert body["active"] == 2
    assert [c["id"] for c in body["cycles"]] == [first, second]

    one = client.get(f"/intervals/{first}").json()
    assert one["firings"] == 1
    assert one["current_delay_ms"] == 20

    r = client.delete(f"/intervals/{second}")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "stopped": second}
    assert second not in manager

    assert client.delete(f"/intervals/{second}").status_code == 404
    assert client.get(f"/intervals/{second}").status_code == 404


def test_non_integer_id_is_rejected(sim_manager):
    _, manager = sim_manager
    client = TestClient(HttpControl(manager).app)
    assert client.get("/intervals/abc").status_code == 422


def test_server_lifespan_starts_and_stops_probe_cycles(sim_manager):
    _, manager = sim_manager
    settings = ServerSettings(
        targets={"b": "http://127.0.0.1:9/b", "a": "http://127.0.0.1:9/a"},
        delays_ms=(100, 200),
    )
    control = build_app(settings, manager=manager)
    with TestClient(control.app) as client:
        body = client.get("/intervals").json()
        assert body["active"] == 2
        names = [c["handler_state"]["name"] for c in body["cycles"]]
        assert names == ["a", "b"]
        assert body["cycles"][0]["handler"] == "UrlProbe"
        assert body["cycles"][0]["delays_ms"] == [100, 200]
    assert len(manager) == 0


def test_server_without_targets_uses_loop_timer():
    control = build_app(ServerSettings())
    with TestClient(control.app) as client:
        assert client.get("/intervals").json() == {"active": 0, "cycles": []}


def test_probe_records_status_and_errors():
    async def main():
        async def health(request):
            return web.Response(status=204)

        app = web.Application()
        app.router.add_get("/health", health)
        async with AiohttpServer(app) as server, aiohttp.ClientSession() as session:
            ok = UrlProbe("ok", str(server.make_url("/health")), session)
            missing = UrlProbe("missing", str(server.make_url("/nope")), session)
            await ok()
            await ok()
            await missing()
            # Nothing listens on the discard port.
            down = UrlProbe("down", "http://127.0.0.1:9/", session, timeout_ms=500)
            await down()
        return ok, missing, down

    ok, missing, down = asyncio.run(main())
    assert ok.brief_state() == {
        "name": "ok",
        "url": ok.url,
        "probes": 2,
        "last_status": 204,
        "last_error": None,
    }
    assert missing.last_status == 404
    assert down.last_status is None
    assert down.last_error
