"""
Heuristic analysis engines: route safety, alternative routing, dynamic
pricing and operational predictions.
"""
from airops.analysis.safety import calculate_safety_score, get_risk_level
from airops.analysis.alternatives import generate_alternative_routes
from airops.analysis.pricing import calculate_optimal_pricing, demand_multiplier

__all__ = [
    "calculate_safety_score",
    "get_risk_level",
    "generate_alternative_routes",
    "calculate_optimal_pricing",
    "demand_multiplier",
]
