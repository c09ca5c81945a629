"""Weather payload parsing and fallback tests."""
import asyncio

import pytest

from airops.analysis.safety import calculate_weather_score, get_weather_impact
from airops.analysis.types import FALLBACK_WEATHER, RouteWeather
from airops.tools.weather_tools import (
    WeatherClient,
    WeatherServiceError,
    get_city_weather,
    get_multiple_cities_weather,
    get_route_weather,
    parse_current_conditions,
    parse_forecast,
    to_snapshot,
)

CURRENT_PAYLOAD = {
    "name": "Dhaka",
    "sys": {"country": "BD"},
    "coord": {"lat": 23.71, "lon": 90.41},
    "main": {"temp": 31.6, "feels_like": 38.2, "humidity": 74, "pressure": 1004},
    "visibility": 3500,
    "wind": {"speed": 5.0, "deg": 180},
    "weather": [{"main": "Rain", "description": "light rain", "icon": "10d"}],
}


def test_current_conditions_units() -> None:
    parsed = parse_current_conditions(CURRENT_PAYLOAD)
    current = parsed["current"]

    assert parsed["location"]["city"] == "Dhaka"
    assert parsed["location"]["coordinates"] == {"lat": 23.71, "lon": 90.41}
    assert current["temperature"] == 32
    assert current["visibility"] == 3.5
    assert current["windSpeed"] == 18
    assert current["condition"] == "Rain"
    assert parsed["source"] == "OpenWeatherMap"


def test_snapshot_for_scoring() -> None:
    snapshot = to_snapshot(CURRENT_PAYLOAD)

    assert snapshot.condition == "Rain"
    assert snapshot.visibility_km == 3.5
    assert snapshot.wind_speed_ms == 5.0


def test_snapshot_without_visibility_uses_fallback_visibility() -> None:
    payload = {key: value for key, value in CURRENT_PAYLOAD.items() if key != "visibility"}
    assert to_snapshot(payload).visibility_km == FALLBACK_WEATHER.visibility_km


def test_forecast_keeps_next_24_hours() -> None:
    entry = {
        "dt_txt": "2026-01-01 00:00:00",
        "main": {"temp": 18.4, "humidity": 60},
        "wind": {"speed": 2.5},
        "weather": [{"main": "Clear", "description": "clear sky", "icon": "01n"}],
    }
    payload = {"city": {"name": "Dhaka", "country": "BD", "coord": {}}, "list": [entry] * 12}

    parsed = parse_forecast(payload)

    assert len(parsed["forecast"]) == 8
    assert parsed["forecast"][0]["temperature"] == 18
    assert parsed["forecast"][0]["windSpeed"] == 9


def test_unconfigured_route_weather_falls_back() -> None:
    client = WeatherClient(api_key="")
    weather = asyncio.run(get_route_weather("Dhaka", "Dubai", client=client))

    assert weather.origin == FALLBACK_WEATHER
    assert weather.destination == FALLBACK_WEATHER


def test_unconfigured_city_lookup_is_unavailable() -> None:
    with pytest.raises(WeatherServiceError) as exc_info:
        asyncio.run(get_city_weather("Dhaka", client=WeatherClient(api_key="")))
    assert exc_info.value.status_code == 503


def test_multiple_cities_report_failures_inline() -> None:
    results = asyncio.run(get_multiple_cities_weather(["Dhaka", "Dubai"], client=WeatherClient(api_key="")))

    assert [r["city"] for r in results] == ["Dhaka", "Dubai"]
    assert all(r["success"] is False for r in results)


def test_metric_breeze_is_not_high_wind() -> None:
    payload = {
        "main": {"temp": 27.0},
        "visibility": 10000,
        "wind": {"speed": 5.0},
        "weather": [{"main": "Clear"}],
    }
    leg = to_snapshot(payload)
    weather = RouteWeather(origin=leg, destination=leg)

    assert calculate_weather_score(weather) == 100
    assert get_weather_impact(weather) == ["Favorable weather conditions"]


def test_gale_above_threshold_is_penalized() -> None:
    payload = {
        "main": {"temp": 12.0},
        "visibility": 10000,
        "wind": {"speed": 21.0},
        "weather": [{"main": "Clear"}],
    }
    leg = to_snapshot(payload)
    calm = to_snapshot({**payload, "wind": {"speed": 3.0}})

    assert calculate_weather_score(RouteWeather(origin=leg, destination=calm)) == 90
    assert get_weather_impact(RouteWeather(origin=leg, destination=calm)) == ["Strong crosswinds possible"]


class ErroringWeatherClient(WeatherClient):
    async def current(self, session, city):
        raise WeatherServiceError("Weather API returned 500", status_code=502)


class MalformedWeatherClient(WeatherClient):
    async def current(self, session, city):
        return {}


def test_unreachable_upstream_falls_back() -> None:
    client = WeatherClient(api_key="k", base_url="http://127.0.0.1:9", timeout_seconds=2)
    weather = asyncio.run(get_route_weather("Dhaka", "Dubai", client=client))

    assert weather.origin == FALLBACK_WEATHER
    assert weather.destination == FALLBACK_WEATHER


def test_upstream_error_status_falls_back() -> None:
    weather = asyncio.run(get_route_weather("Dhaka", "Dubai", client=ErroringWeatherClient(api_key="k")))

    assert weather.origin == FALLBACK_WEATHER
    assert weather.destination == FALLBACK_WEATHER


def test_malformed_payload_falls_back() -> None:
    weather = asyncio.run(get_route_weather("Dhaka", "Dubai", client=MalformedWeatherClient(api_key="k")))

    assert weather.origin == FALLBACK_WEATHER
    assert weather.destination == FALLBACK_WEATHER
