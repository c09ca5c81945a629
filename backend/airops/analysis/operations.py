"""
Operational heuristics: delay prediction, terminal passenger flow and
maintenance prediction.

Each heuristic follows the same pattern as the safety and pricing engines:
gather (simulated) signals, apply fixed rules, return a score with factors
and recommendations. All randomness comes from the ``rng`` argument.
"""
import math
import random
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional

from airops.analysis.safety import get_aircraft_reliability


# ==================== Delay prediction ====================

BASE_DELAY_PROBABILITY = 0.1
MAX_DELAY_PROBABILITY = 0.8
MINUTES_PER_PROBABILITY = 45


def forecast_route_weather(origin: str, destination: str) -> Dict[str, Any]:
    """Simplified en-route forecast used by the delay model."""
    return {
        "departure": {"condition": "Clear", "probability": 0.1},
        "arrival": {"condition": "Partly Cloudy", "probability": 0.2},
        "enRoute": {"turbulence": "Light", "probability": 0.15},
    }


def analyze_air_traffic(rng: random.Random) -> Dict[str, Any]:
    return {
        "congestion": "High" if rng.random() > 0.7 else "Medium",
        "delayProbability": round(0.1 + rng.random() * 0.2, 3),
        "peakHours": ["06:00-08:00", "16:00-18:00"],
    }


def historical_delays(aircraft: Optional[str], rng: random.Random) -> Dict[str, Any]:
    return {
        "averageDelay": round(12 + rng.random() * 18, 1),
        "seasonalPattern": "Higher delays in winter months",
        "aircraftReliability": get_aircraft_reliability(aircraft),
    }


def maintenance_status(rng: random.Random, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    return {
        "lastMaintenance": (now - timedelta(days=rng.random() * 30)).isoformat(),
        "nextScheduled": (now + timedelta(days=rng.random() * 60)).isoformat(),
        "status": "Good",
    }


def predict_delay(
    weather: Dict[str, Any],
    traffic: Dict[str, Any],
    historical: Dict[str, Any],
) -> Dict[str, Any]:
    """Additive delay probability, capped at 0.8."""
    probability = BASE_DELAY_PROBABILITY

    if weather["departure"]["condition"] != "Clear":
        probability += 0.2
    if traffic["congestion"] == "High":
        probability += 0.15
    if historical["averageDelay"] > 20:
        probability += 0.1

    probability = round(min(probability, MAX_DELAY_PROBABILITY), 2)

    return {
        "probability": probability,
        "expectedMinutes": round(probability * MINUTES_PER_PROBABILITY),
        "confidence": 0.75,
        "factors": ["Weather conditions", "Air traffic", "Historical patterns"],
        "recommendations": ["Monitor weather closely", "Consider earlier departure"],
        "mitigation": ["Have backup aircraft ready", "Notify passengers early"],
        "alternatives": ["Delay by 2 hours", "Use different aircraft", "Cancel if necessary"],
    }


def run_delay_prediction(
    origin: str,
    destination: str,
    aircraft: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    rng = rng or random.Random()
    weather = forecast_route_weather(origin, destination)
    traffic = analyze_air_traffic(rng)
    historical = historical_delays(aircraft, rng)
    prediction = predict_delay(weather, traffic, historical)
    prediction["maintenance"] = maintenance_status(rng)
    prediction["traffic"] = traffic
    return prediction


# ==================== Passenger flow ====================

TERMINAL_PEAK_CAPACITY = 5000
PASSENGERS_PER_CHECKIN_COUNTER = 200
PASSENGERS_PER_SECURITY_LANE = 300
PASSENGERS_PER_STAFF = 150


def analyze_terminal_capacity(rng: random.Random) -> Dict[str, Any]:
    return {
        "utilization": round(0.6 + rng.random() * 0.3, 3),
        "peakCapacity": TERMINAL_PEAK_CAPACITY,
        "currentLoad": round(3000 + rng.random() * 1500),
    }


def predict_passenger_flow(
    expected_passengers: Optional[int],
    flight_schedule: Optional[List[Any]],
) -> Dict[str, Any]:
    return {
        "bottlenecks": ["Security checkpoint", "Immigration"],
        "waitTimes": {
            "checkin": "15-25 minutes",
            "security": "20-35 minutes",
            "immigration": "10-20 minutes",
        },
        "peakTimes": ["07:00-09:00", "14:00-16:00", "18:00-20:00"],
    }


def optimize_resources(capacity: Dict[str, Any], rng: random.Random) -> Dict[str, Any]:
    load = capacity["currentLoad"]
    return {
        "allocation": {
            "checkInCounters": math.ceil(load / PASSENGERS_PER_CHECKIN_COUNTER),
            "securityLanes": math.ceil(load / PASSENGERS_PER_SECURITY_LANE),
            "staffRequired": math.ceil(load / PASSENGERS_PER_STAFF),
        },
        "recommendations": [
            "Open additional security lanes during peak hours",
            "Deploy mobile check-in assistance",
            "Implement queue management system",
        ],
        "score": round(85 + rng.random() * 10, 1),
    }


def run_passenger_flow(
    expected_passengers: Optional[int] = None,
    flight_schedule: Optional[List[Any]] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    rng = rng or random.Random()
    capacity = analyze_terminal_capacity(rng)
    flow = predict_passenger_flow(expected_passengers, flight_schedule)
    resources = optimize_resources(capacity, rng)
    return {"capacity": capacity, "flow": flow, "resources": resources}


# ==================== Maintenance prediction ====================

MONITORED_COMPONENTS = ("Engine", "Landing Gear", "Avionics", "Hydraulics")
HOURS_PER_CYCLE = 2.5


def analyze_aircraft_usage(flight_hours: float, rng: random.Random) -> Dict[str, Any]:
    return {
        "utilizationRate": round(0.7 + rng.random() * 0.2, 3),
        "cyclesCompleted": math.floor(flight_hours / HOURS_PER_CYCLE),
        "stressFactors": ["High-altitude flights", "Frequent takeoffs/landings"],
    }


def predict_component_wear(rng: random.Random) -> Dict[str, Any]:
    issues = []
    for component in MONITORED_COMPONENTS:
        issues.append({
            "component": component,
            "wearLevel": round(rng.random() * 100, 1),
            "timeToMaintenance": math.floor(rng.random() * 180) + 30,
            "criticalLevel": "High" if rng.random() > 0.8 else "Medium",
        })
    return {
        "issues": issues,
        "risks": ["Potential engine efficiency degradation", "Landing gear inspection due"],
    }


def calculate_maintenance_priority(wear: Dict[str, Any], rng: random.Random) -> Dict[str, Any]:
    critical = [issue for issue in wear["issues"] if issue["criticalLevel"] == "High"]
    return {
        "score": 85 if critical else 95,
        "urgency": "High" if critical else "Medium",
        "actions": [
            "Schedule engine inspection",
            "Check hydraulic fluid levels",
            "Update avionics software",
        ],
        "cost": round(250000 + rng.random() * 500000),
        "timeframe": "7-14 days",
    }


def run_maintenance_prediction(
    aircraft: str,
    flight_hours: float = 0,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    rng = rng or random.Random()
    usage = analyze_aircraft_usage(flight_hours, rng)
    wear = predict_component_wear(rng)
    priority = calculate_maintenance_priority(wear, rng)
    return {"usage": usage, "wear": wear, "priority": priority}
