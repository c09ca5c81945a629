"""
Route Safety Scoring Engine

Combines weather at both ends of a route, the route's historical
punctuality and the airspace assessment into a bounded 0-100 safety score,
a risk tier and a list of operational recommendations.

The three sub-scores are combined multiplicatively, as independent
probability-like factors: a single badly degraded dimension pulls the
composite down harder than an additive blend would.
"""
import random
from typing import Dict, Any, List, Optional

import structlog

from airops.analysis.rounding import round_half_up
from airops.analysis.types import (
    AirspaceAssessment,
    RiskLevel,
    RouteHistory,
    RouteWeather,
    SafetyAnalysis,
    SecurityLevel,
)

logger = structlog.get_logger()


# Weather rules, applied to each leg independently
WEATHER_CONDITION_PENALTIES = {
    "Rain": 10,
    "Thunderstorm": 25,
    "Snow": 20,
}
LOW_VISIBILITY_KM = 5
LOW_VISIBILITY_PENALTY = 15
HIGH_WIND_SPEED_MS = 15
CROSSWIND_SPEED_MS = 20
HIGH_WIND_PENALTY = 10
WEATHER_SCORE_FLOOR = 30

# Airspace rules
SECURITY_LEVEL_PENALTIES = {
    SecurityLevel.HIGH: 30,
    SecurityLevel.MEDIUM: 15,
}
ALTERNATIVE_ROUTING_PENALTY = 20
RISK_FACTOR_PENALTY = 10
AIRSPACE_SCORE_FLOOR = 40

DEFAULT_HISTORY_SCORE = 90.0

# Ordered (threshold, tier); first threshold the score reaches wins
RISK_THRESHOLDS = (
    (85, RiskLevel.LOW),
    (70, RiskLevel.MEDIUM),
    (50, RiskLevel.HIGH),
)

AIRCRAFT_RELIABILITY = {
    "Boeing 737": 94,
    "Boeing 777": 96,
    "Boeing 787": 92,
    "Airbus A320": 95,
    "Airbus A330": 93,
    "Airbus A350": 97,
}
DEFAULT_AIRCRAFT_RELIABILITY = 90

TECHNICAL_SCORE = 92
APPROVED_MESSAGE = "Route approved for normal operations"


def calculate_weather_score(weather: RouteWeather) -> int:
    """Weather sub-score: 100 minus per-leg penalties, never below 30."""
    score = 100
    for leg in weather.legs:
        score -= WEATHER_CONDITION_PENALTIES.get(leg.condition, 0)
        if leg.visibility_km < LOW_VISIBILITY_KM:
            score -= LOW_VISIBILITY_PENALTY
        if leg.wind_speed_ms > HIGH_WIND_SPEED_MS:
            score -= HIGH_WIND_PENALTY
    return max(score, WEATHER_SCORE_FLOOR)


def calculate_airspace_score(airspace: AirspaceAssessment) -> int:
    """Airspace sub-score: 100 minus security and risk-factor penalties, never below 40."""
    score = 100
    score -= SECURITY_LEVEL_PENALTIES.get(airspace.security_level, 0)
    if airspace.alternative_routes_required:
        score -= ALTERNATIVE_ROUTING_PENALTY
    score -= RISK_FACTOR_PENALTY * len(airspace.risk_factors)
    return max(score, AIRSPACE_SCORE_FLOOR)


def calculate_history_score(history: RouteHistory) -> float:
    if history.on_time_rate is None:
        return DEFAULT_HISTORY_SCORE
    return float(history.on_time_rate)


def get_risk_level(score: float) -> RiskLevel:
    for threshold, level in RISK_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.CRITICAL


def get_aircraft_reliability(aircraft: Optional[str]) -> int:
    return AIRCRAFT_RELIABILITY.get(aircraft or "", DEFAULT_AIRCRAFT_RELIABILITY)


def has_thunderstorm(weather: RouteWeather) -> bool:
    return any(leg.condition == "Thunderstorm" for leg in weather.legs)


def get_weather_impact(weather: RouteWeather) -> List[str]:
    impacts = []

    if has_thunderstorm(weather):
        impacts.append("Possible thunderstorm delays")
    if any(leg.visibility_km < 3 for leg in weather.legs):
        impacts.append("Low visibility conditions")
    if any(leg.wind_speed_ms > CROSSWIND_SPEED_MS for leg in weather.legs):
        impacts.append("Strong crosswinds possible")

    return impacts or ["Favorable weather conditions"]


def get_weather_recommendations(weather: RouteWeather) -> List[str]:
    recommendations = []

    if weather.origin.condition == "Thunderstorm":
        recommendations.append("Monitor departure airport for storm activity")
    if weather.destination.condition == "Thunderstorm":
        recommendations.append("Have alternate destination ready")
    if any(leg.visibility_km < LOW_VISIBILITY_KM for leg in weather.legs):
        recommendations.append("Ensure ILS approach capability")

    return recommendations or ["Proceed with normal operations"]


def generate_safety_recommendations(
    score: int,
    weather: RouteWeather,
    history: RouteHistory,
    airspace: AirspaceAssessment,
) -> List[str]:
    """Independent rule checks; never returns an empty list."""
    recommendations = []

    if score < 70:
        recommendations.append("Consider delaying departure or using alternative route")
    if has_thunderstorm(weather):
        recommendations.append("Wait for weather to clear before departure")
    if airspace.alternative_routes_required:
        recommendations.append("Use alternative routing to avoid restricted airspace")
    if history.on_time_rate is not None and history.on_time_rate < 80:
        recommendations.append("Allow extra time for this route due to historical delays")

    return recommendations or [APPROVED_MESSAGE]


def _air_traffic_snapshot(rng: random.Random) -> Dict[str, Any]:
    # Display only; does not feed the overall score
    return {
        "score": round(85 + rng.random() * 10, 1),
        "congestionLevel": "Moderate",
        "peakHours": ["07:00-09:00", "17:00-19:00"],
    }


def calculate_safety_score(
    weather: RouteWeather,
    history: RouteHistory,
    airspace: AirspaceAssessment,
    aircraft: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> SafetyAnalysis:
    """
    Produce a SafetyAnalysis for a route.

    Args:
        weather: Current conditions at origin and destination
        history: Trailing-window punctuality of the route
        airspace: Security / conflict assessment of the route
        aircraft: Aircraft type, used for the technical reliability rating
        rng: Random source for the decorative air-traffic score

    Returns:
        SafetyAnalysis with overall score, risk tier, per-category detail
        and recommendations
    """
    rng = rng or random.Random()

    weather_score = calculate_weather_score(weather)
    history_score = calculate_history_score(history)
    airspace_score = calculate_airspace_score(airspace)

    score = 100.0
    score *= weather_score / 100
    score *= history_score / 100
    score *= airspace_score / 100
    overall_score = max(0, min(100, round_half_up(score)))

    risk_level = get_risk_level(overall_score)

    logger.debug(
        "Safety score calculated",
        weather_score=weather_score,
        history_score=history_score,
        airspace_score=airspace_score,
        overall_score=overall_score,
        risk_level=risk_level.value,
    )

    return SafetyAnalysis(
        overall_score=overall_score,
        risk_level=risk_level,
        weather={
            "score": weather_score,
            "impact": get_weather_impact(weather),
            "recommendations": get_weather_recommendations(weather),
        },
        air_traffic=_air_traffic_snapshot(rng),
        geopolitical={
            "score": airspace_score,
            "riskLevel": airspace.security_level.value,
            "factors": list(airspace.risk_factors),
        },
        technical={
            "score": TECHNICAL_SCORE,
            "aircraftReliability": get_aircraft_reliability(aircraft),
            "maintenanceStatus": "Good",
        },
        historical={
            "score": history_score,
            "onTimeRate": history.on_time_rate,
            "averageDelay": history.average_delay,
        },
        recommendations=generate_safety_recommendations(overall_score, weather, history, airspace),
    )
