"""Shared fakes for the upstream transport, the clock and the Flask app."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
import requests

from app import create_app
from config import Settings
from services.cache import ResponseCache
from services.provider import OpenWeatherClient

BASE_URL = "https://api.test/data/2.5"
GEOCODING_URL = "https://api.test/geo/1.0/direct"

SUNRISE = 1_760_866_200  # 2025-10-19 09:30 UTC
SUNSET = 1_760_913_000  # 2025-10-19 22:30 UTC


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Routes ``get`` calls by URL suffix to a canned response or exception."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = routes or {}
        self.headers: dict[str, str] = {}
        self.calls: list[SimpleNamespace] = []
        self.closed = False

    def get(self, url: str, params: dict | None = None, timeout: float | None = None) -> FakeResponse:
        self.calls.append(SimpleNamespace(url=url, params=dict(params or {}), timeout=timeout))
        for suffix, outcome in self.routes.items():
            if url.endswith(suffix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise AssertionError(f"unexpected upstream url: {url}")

    def close(self) -> None:
        self.closed = True

    def calls_to(self, suffix: str) -> list[SimpleNamespace]:
        return [call for call in self.calls if call.url.endswith(suffix)]


class FakeClock:
    def __init__(self, now: float = 1_760_880_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def weather_payload(**overrides: Any) -> dict:
    payload = {
        "coord": {"lon": -58.38, "lat": -34.6},
        "weather": [{"id": 800, "main": "Clear", "description": "cielo claro", "icon": "01d"}],
        "main": {"temp": 18.2, "feels_like": 17.6, "humidity": 60},
        "sys": {"country": "AR", "sunrise": SUNRISE, "sunset": SUNSET},
        "timezone": -10800,
        "name": "Buenos Aires",
        "cod": 200,
    }
    payload.update(overrides)
    return payload


def onecall_payload() -> dict:
    return {
        "current": {"uvi": 7.4, "sunrise": SUNRISE + 60, "sunset": SUNSET + 60},
        "daily": [{"pop": 0.55}, {"pop": 0.1}],
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-key",
        base_url=BASE_URL,
        geocoding_url=GEOCODING_URL,
        rate_limit_enabled=False,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(ttl=600, clock=clock)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def upstream(settings: Settings, session: FakeSession) -> OpenWeatherClient:
    return OpenWeatherClient(settings, session=session)  # type: ignore[arg-type]


@pytest.fixture
def client(settings: Settings, cache: ResponseCache, upstream: OpenWeatherClient):
    app = create_app(settings, cache=cache, client=upstream)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def network_down() -> requests.ConnectionError:
    return requests.ConnectionError("Failed to establish a new connection")
