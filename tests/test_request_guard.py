# tests/test_request_guard.py
from types import SimpleNamespace

import pytest

from classroom_api.core.config import settings
from classroom_api.core.request_guard import (
    AllowAllGuard,
    RequestGuard,
    SlidingWindowGuard,
    build_request_guard,
)
from classroom_api.main import app, run


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def _request(host="10.0.0.1", path="/users"):
    return SimpleNamespace(
        client=SimpleNamespace(host=host),
        method="GET",
        url=SimpleNamespace(path=path),
    )


class TestSlidingWindowGuard:

    def test_allows_up_to_limit_then_denies(self):
        guard = SlidingWindowGuard(max_requests=5, interval_seconds=2.0, clock=FakeClock())

        results = [guard.is_allowed(_request()) for _ in range(6)]

        assert results == [True] * 5 + [False]

    def test_window_slides(self):
        clock = FakeClock()
        guard = SlidingWindowGuard(max_requests=2, interval_seconds=2.0, clock=clock)

        assert guard.is_allowed(_request())
        clock.now += 1.0
        assert guard.is_allowed(_request())
        assert not guard.is_allowed(_request())

        # The first hit has left the window
        clock.now += 1.5
        assert guard.is_allowed(_request())

    def test_clients_are_counted_separately(self):
        guard = SlidingWindowGuard(max_requests=1, interval_seconds=2.0, clock=FakeClock())

        assert guard.is_allowed(_request(host="10.0.0.1"))
        assert guard.is_allowed(_request(host="10.0.0.2"))
        assert not guard.is_allowed(_request(host="10.0.0.1"))

    def test_idle_clients_are_forgotten(self):
        """
        Scenario: many addresses send one request each, then go quiet.
        Expected: once the window has passed, only the newest client is tracked.
        """
        clock = FakeClock()
        guard = SlidingWindowGuard(max_requests=5, interval_seconds=2.0, clock=clock)
        for n in range(1000):
            guard.is_allowed(_request(host=f"10.1.{n // 256}.{n % 256}"))
        assert guard.tracked_clients == 1000

        clock.now += 10_000
        assert guard.is_allowed(_request(host="10.9.9.9"))

        assert guard.tracked_clients == 1

    def test_active_clients_survive_a_sweep(self):
        clock = FakeClock()
        guard = SlidingWindowGuard(max_requests=1, interval_seconds=2.0, clock=clock)
        guard.is_allowed(_request(host="10.0.0.1"))

        clock.now += 1.0
        guard.is_allowed(_request(host="10.0.0.2"))
        clock.now += 1.5
        guard.is_allowed(_request(host="10.0.0.3"))

        # 10.0.0.2 is still inside its window and stays throttled
        assert guard.tracked_clients == 2
        assert not guard.is_allowed(_request(host="10.0.0.2"))

    @pytest.mark.parametrize("max_requests, interval", [(0, 2.0), (5, 0)])
    def test_rejects_bad_configuration(self, max_requests, interval):
        with pytest.raises(ValueError):
            SlidingWindowGuard(max_requests=max_requests, interval_seconds=interval)


class TestGuardContract:

    def test_provider_must_implement_is_allowed(self):
        class Incomplete(RequestGuard):
            pass

        with pytest.raises(TypeError):
            Incomplete()


class TestGuardSelection:

    def test_disabled_guard_allows_everything(self):
        guard = build_request_guard(settings.model_copy(update={"RATE_LIMIT_ENABLED": False}))
        assert isinstance(guard, AllowAllGuard)

    def test_enabled_guard_uses_configured_window(self):
        guard = build_request_guard(settings.model_copy(update={
            "RATE_LIMIT_ENABLED": True,
            "RATE_LIMIT_MAX_REQUESTS": 3,
            "RATE_LIMIT_INTERVAL_SECONDS": 1.5,
        }))
        assert isinstance(guard, SlidingWindowGuard)
        assert guard.max_requests == 3
        assert guard.interval_seconds == 1.5


class TestGuardMiddleware:

    def test_denied_request_gets_429_envelope(self, client, campus):
        app.state.request_guard = SlidingWindowGuard(max_requests=2, interval_seconds=60.0)

        statuses = [client.get("/users").status_code for _ in range(3)]
        denied = client.get("/users")

        assert statuses == [200, 200, 429]
        assert denied.json() == {"error": "Too many requests"}

    def test_guard_runs_before_routing(self, client):
        app.state.request_guard = SlidingWindowGuard(max_requests=1, interval_seconds=60.0)

        client.get("/does-not-exist")
        response = client.get("/also-missing")

        assert response.status_code == 429


class TestServiceEndpoints:

    def test_root(self, client):
        body = client.get("/").json()
        assert body["message"] == settings.API_TITLE

    def test_health_reports_database(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["database"] == "healthy"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_run_serves_configured_address(self, monkeypatch):
        calls = {}
        monkeypatch.setattr("uvicorn.run", lambda target, **kwargs: calls.update(target=target, **kwargs))

        run()

        assert calls["target"] == "classroom_api.main:app"
        assert calls["host"] == settings.API_HOST
        assert calls["port"] == settings.API_PORT
        assert calls["reload"] is settings.DEBUG
