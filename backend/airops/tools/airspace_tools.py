"""
Airspace Tools

Simulated security and conflict-zone assessment of a route.
"""
import random
from typing import Optional

from airops.analysis.types import AirspaceAssessment, SecurityLevel

CONFLICT_ZONES = ("Syria", "Ukraine", "Afghanistan", "Iraq")


def draw_security_level(rng: random.Random) -> SecurityLevel:
    if rng.random() > 0.8:
        return SecurityLevel.HIGH
    if rng.random() > 0.5:
        return SecurityLevel.MEDIUM
    return SecurityLevel.LOW


def is_conflict_route(origin: str, destination: str) -> bool:
    cities = (origin.lower(), destination.lower())
    return any(zone.lower() in city for zone in CONFLICT_ZONES for city in cities)


def get_airspace_assessment(
    origin: str,
    destination: str,
    rng: Optional[random.Random] = None,
) -> AirspaceAssessment:
    """Static conflict-zone matching plus a randomized security level."""
    rng = rng or random.Random()
    security_level = draw_security_level(rng)

    risk_factors = []
    if security_level == SecurityLevel.HIGH:
        risk_factors.append("Heightened security measures")

    conflict = is_conflict_route(origin, destination)
    if conflict:
        risk_factors.append("Route passes through conflict zone")

    return AirspaceAssessment(
        security_level=security_level,
        risk_factors=risk_factors,
        alternative_routes_required=conflict,
    )
