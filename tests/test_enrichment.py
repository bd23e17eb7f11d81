"""Enrichment trigger, merge rules and failure capture."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from conftest import SUNRISE, SUNSET, weather_payload
from services.enrichment import (
    enrichment_coordinates,
    fetch_enrichment,
    merge_enrichment,
    needs_enrichment,
)
from services.errors import RequestTimeout
from services.weather import LocationQuery


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        (weather_payload(), False),
        (weather_payload(sys={"sunset": SUNSET}), False),
        (weather_payload(sys={"country": "AR"}, sunrise=SUNRISE), False),
        (weather_payload(sys={"country": "AR"}), True),
        (weather_payload(sys=None), True),
    ],
)
def test_needs_enrichment_only_without_any_sun_time(payload: dict, expected: bool) -> None:
    assert needs_enrichment(payload) is expected


def test_merge_never_overwrites_present_fields() -> None:
    payload = {"uvi": 3.0, "pop": 0.0, "sunrise": 100, "sunset": 200}
    fields = {"uvi": 9.0, "pop": 0.9, "sunrise": 1, "sunset": 2}

    merge_enrichment(payload, fields)

    assert payload == {"uvi": 3.0, "pop": 0.0, "sunrise": 100, "sunset": 200}


def test_merge_fills_missing_and_null_slots() -> None:
    payload = {"uvi": None, "sunset": 200}

    merge_enrichment(payload, {"uvi": 9.0, "pop": 0.9, "sunrise": 1, "sunset": 2})

    assert payload == {"uvi": 9.0, "pop": 0.9, "sunrise": 1, "sunset": 200}


def test_coordinates_prefer_payload_then_query() -> None:
    assert enrichment_coordinates(weather_payload()) == (-34.6, -58.38)
    assert enrichment_coordinates({}, LocationQuery(lat="1.5", lon="2.5")) == ("1.5", "2.5")
    assert enrichment_coordinates({}, LocationQuery(city="Rosario")) is None


def test_fetch_enrichment_carries_provider_errors() -> None:
    def fail(lat, lon):
        raise RequestTimeout("OneCall request timed out after 10s")

    result = fetch_enrichment(SimpleNamespace(fetch_enrichment=fail), 1.0, 2.0)

    assert not result.ok
    assert isinstance(result.error, RequestTimeout)
    assert result.fields == {}


def test_fetch_enrichment_success() -> None:
    client = SimpleNamespace(fetch_enrichment=lambda lat, lon: {"uvi": 4.2})

    result = fetch_enrichment(client, 1.0, 2.0)

    assert result.ok
    assert result.fields == {"uvi": 4.2}
