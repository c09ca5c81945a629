"""Route safety scoring tests."""
import random

import pytest

from airops.analysis.safety import (
    APPROVED_MESSAGE,
    calculate_airspace_score,
    calculate_history_score,
    calculate_safety_score,
    calculate_weather_score,
    get_risk_level,
)
from airops.analysis.types import (
    AirspaceAssessment,
    BASELINE_ROUTE_HISTORY,
    RiskLevel,
    RouteHistory,
    RouteWeather,
    SecurityLevel,
    WeatherSnapshot,
)


def _history(on_time_rate):
    return RouteHistory(
        total_flights=20,
        on_time_rate=on_time_rate,
        delay_rate=0.0,
        cancellation_rate=0.0,
        average_delay=0.0,
    )


def _weather(origin, destination=None):
    return RouteWeather(origin=origin, destination=destination or origin)


STORM = WeatherSnapshot(condition="Thunderstorm", visibility_km=2, wind_speed_ms=20, temperature_c=24)
CLEAR = WeatherSnapshot(condition="Clear", visibility_km=10, wind_speed_ms=5, temperature_c=28)


def test_storm_at_origin_scores_critical(quiet_airspace, rng) -> None:
    analysis = calculate_safety_score(_weather(STORM, CLEAR), _history(95.0), quiet_airspace, rng=rng)

    assert analysis.weather["score"] == 50
    assert analysis.overall_score == 48
    assert analysis.risk_level == RiskLevel.CRITICAL
    assert "Wait for weather to clear before departure" in analysis.recommendations
    assert "Consider delaying departure or using alternative route" in analysis.recommendations


def test_all_clear_route_is_approved(clear_weather, perfect_history, quiet_airspace, rng) -> None:
    analysis = calculate_safety_score(clear_weather, perfect_history, quiet_airspace, rng=rng)

    assert analysis.overall_score == 100
    assert analysis.risk_level == RiskLevel.LOW
    assert analysis.recommendations == [APPROVED_MESSAGE]
    assert analysis.weather["impact"] == ["Favorable weather conditions"]


def test_weather_score_never_below_floor() -> None:
    worst = WeatherSnapshot(condition="Thunderstorm", visibility_km=0.5, wind_speed_ms=60, temperature_c=-5)
    assert calculate_weather_score(_weather(worst)) == 30


def test_rain_and_snow_penalties() -> None:
    rain = WeatherSnapshot(condition="Rain", visibility_km=8, wind_speed_ms=10, temperature_c=20)
    snow = WeatherSnapshot(condition="Snow", visibility_km=8, wind_speed_ms=10, temperature_c=-2)
    assert calculate_weather_score(_weather(rain, snow)) == 70


def test_wind_threshold_is_exclusive() -> None:
    breezy = WeatherSnapshot(condition="Clear", visibility_km=10, wind_speed_ms=15, temperature_c=20)
    assert calculate_weather_score(_weather(breezy)) == 100


def test_airspace_score_floor_and_penalties() -> None:
    high = AirspaceAssessment(
        security_level=SecurityLevel.HIGH,
        risk_factors=["Heightened security measures", "Route passes through conflict zone"],
        alternative_routes_required=True,
    )
    medium = AirspaceAssessment(security_level=SecurityLevel.MEDIUM)

    assert calculate_airspace_score(high) == 40
    assert calculate_airspace_score(medium) == 85


def test_unknown_on_time_rate_uses_default() -> None:
    assert calculate_history_score(_history(None)) == 90.0
    assert calculate_history_score(BASELINE_ROUTE_HISTORY) == 92.0


@pytest.mark.parametrize("score, level", [
    (100, RiskLevel.LOW),
    (85, RiskLevel.LOW),
    (84, RiskLevel.MEDIUM),
    (70, RiskLevel.MEDIUM),
    (69, RiskLevel.HIGH),
    (50, RiskLevel.HIGH),
    (49, RiskLevel.CRITICAL),
    (0, RiskLevel.CRITICAL),
])
def test_risk_level_boundaries(score, level) -> None:
    assert get_risk_level(score) == level


def test_worse_weather_never_raises_score(perfect_history, quiet_airspace) -> None:
    rain = WeatherSnapshot(condition="Rain", visibility_km=10, wind_speed_ms=5, temperature_c=20)
    scores = [
        calculate_safety_score(_weather(w), perfect_history, quiet_airspace, rng=random.Random(0)).overall_score
        for w in (CLEAR, rain, STORM)
    ]
    assert scores == sorted(scores, reverse=True)


def test_delayed_route_gets_buffer_advice(clear_weather, quiet_airspace, rng) -> None:
    analysis = calculate_safety_score(clear_weather, _history(75.0), quiet_airspace, rng=rng)
    assert "Allow extra time for this route due to historical delays" in analysis.recommendations


def test_restricted_airspace_recommends_rerouting(clear_weather, perfect_history, rng) -> None:
    airspace = AirspaceAssessment(
        security_level=SecurityLevel.LOW,
        risk_factors=["Route passes through conflict zone"],
        alternative_routes_required=True,
    )
    analysis = calculate_safety_score(clear_weather, perfect_history, airspace, rng=rng)

    assert analysis.geopolitical["score"] == 70
    assert "Use alternative routing to avoid restricted airspace" in analysis.recommendations


def test_aircraft_reliability_in_technical_category(clear_weather, perfect_history, quiet_airspace, rng) -> None:
    known = calculate_safety_score(clear_weather, perfect_history, quiet_airspace, aircraft="Airbus A350", rng=rng)
    unknown = calculate_safety_score(clear_weather, perfect_history, quiet_airspace, aircraft="Concorde", rng=rng)

    assert known.technical["aircraftReliability"] == 97
    assert unknown.technical["aircraftReliability"] == 90
    assert set(known.categories()) == {"weather", "airTraffic", "geopolitical", "technical", "historical"}
