"""
Alternative Route Generator

Proposes transit routings when a direct itinerary scores poorly. This is a
randomized simulation over a fixed hub list, not a path search.
"""
import random
from typing import List, Optional

from airops.analysis.rounding import round_half_up
from airops.analysis.types import AlternativeRoute, SafetyAnalysis

TRANSIT_HUBS = ("Dubai", "Istanbul", "Doha", "Singapore", "Frankfurt", "London")
MAX_ALTERNATIVES = 3
ALTERNATIVE_TRIGGER_SCORE = 80
MAX_ALTERNATIVE_SCORE = 95

ALTERNATIVE_ADVANTAGES = (
    "Avoids primary risk factors",
    "Better weather conditions",
    "Lower air traffic density",
)


def generate_alternative_routes(
    origin: str,
    destination: str,
    analysis: SafetyAnalysis,
    rng: Optional[random.Random] = None,
) -> List[AlternativeRoute]:
    """Return up to three distinct transit alternatives when the score is below 80."""
    if analysis.overall_score >= ALTERNATIVE_TRIGGER_SCORE:
        return []

    rng = rng or random.Random()
    excluded = {origin.strip().lower(), destination.strip().lower()}
    candidates = [hub for hub in TRANSIT_HUBS if hub.lower() not in excluded]
    hubs = rng.sample(candidates, min(MAX_ALTERNATIVES, len(candidates)))

    alternatives = []
    for hub in hubs:
        boosted = analysis.overall_score + 10 + rng.random() * 10
        alternatives.append(
            AlternativeRoute(
                route=f"{origin} → {hub} → {destination}",
                transit=hub,
                safety_score=min(MAX_ALTERNATIVE_SCORE, round_half_up(boosted)),
                additional_time_hours=round(2 + rng.random() * 4, 1),
                cost="Medium",
                advantages=list(ALTERNATIVE_ADVANTAGES),
            )
        )
    return alternatives
