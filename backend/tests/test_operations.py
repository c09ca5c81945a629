"""Delay, passenger flow, maintenance and airspace heuristic tests."""
import random

from airops.analysis.operations import (
    predict_delay,
    run_delay_prediction,
    run_maintenance_prediction,
    run_passenger_flow,
)
from airops.analysis.types import SecurityLevel
from airops.tools.airspace_tools import get_airspace_assessment, is_conflict_route


CLEAR_FORECAST = {"departure": {"condition": "Clear"}}
STORMY_FORECAST = {"departure": {"condition": "Thunderstorm"}}


def test_delay_probability_baseline() -> None:
    prediction = predict_delay(CLEAR_FORECAST, {"congestion": "Medium"}, {"averageDelay": 10})
    assert prediction["probability"] == 0.1
    assert prediction["expectedMinutes"] == 4


def test_delay_probability_accumulates_factors() -> None:
    prediction = predict_delay(STORMY_FORECAST, {"congestion": "High"}, {"averageDelay": 25})
    assert prediction["probability"] == 0.55
    assert prediction["expectedMinutes"] == 25


def test_delay_prediction_payload(rng) -> None:
    prediction = run_delay_prediction("Dhaka", "Dubai", aircraft="Boeing 777", rng=rng)

    assert 0.1 <= prediction["probability"] <= 0.8
    assert prediction["maintenance"]["status"] == "Good"
    assert prediction["traffic"]["congestion"] in ("High", "Medium")


def test_passenger_flow_allocation_follows_load(rng) -> None:
    result = run_passenger_flow(expected_passengers=3500, rng=rng)
    load = result["capacity"]["currentLoad"]
    allocation = result["resources"]["allocation"]

    assert 3000 <= load <= 4500
    assert allocation["checkInCounters"] * 200 >= load
    assert allocation["securityLanes"] * 300 >= load
    assert allocation["staffRequired"] * 150 >= load


def test_maintenance_cycles_from_flight_hours(rng) -> None:
    result = run_maintenance_prediction("Boeing 737", flight_hours=1000, rng=rng)

    assert result["usage"]["cyclesCompleted"] == 400
    assert len(result["wear"]["issues"]) == 4
    assert result["priority"]["urgency"] in ("High", "Medium")


def test_critical_component_raises_urgency() -> None:
    for seed in range(30):
        result = run_maintenance_prediction("Airbus A320", rng=random.Random(seed))
        critical = any(i["criticalLevel"] == "High" for i in result["wear"]["issues"])
        assert result["priority"]["score"] == (85 if critical else 95)


def test_conflict_route_requires_alternative_routing(rng) -> None:
    assessment = get_airspace_assessment("Kabul, Afghanistan", "Dhaka", rng=rng)

    assert assessment.alternative_routes_required is True
    assert "Route passes through conflict zone" in assessment.risk_factors
    assert assessment.airspace_restrictions == "Moderate"


def test_conflict_matching_ignores_case() -> None:
    assert is_conflict_route("dhaka", "kyiv, ukraine")
    assert not is_conflict_route("Dhaka", "London")


def test_high_security_adds_risk_factor() -> None:
    for seed in range(30):
        assessment = get_airspace_assessment("Dhaka", "London", rng=random.Random(seed))
        assert ("Heightened security measures" in assessment.risk_factors) == (
            assessment.security_level == SecurityLevel.HIGH
        )
        assert assessment.alternative_routes_required is False
