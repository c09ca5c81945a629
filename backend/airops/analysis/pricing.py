"""
Dynamic Pricing Engine

Scales simulated baseline fares by forecast demand and attaches a revenue
projection and pricing advice.
"""
import random
from typing import List, Optional

import structlog

from airops.analysis.rounding import round_half_up
from airops.analysis.types import (
    BaseFares,
    CabinPrices,
    CompetitorSnapshot,
    DemandForecast,
    MarketSnapshot,
    PricingAnalysis,
    RevenueProjection,
)

logger = structlog.get_logger()

# (minimum, spread) of the simulated baseline fare per cabin
BASE_FARE_RANGES = {
    "economy": (30000, 20000),
    "business": (90000, 40000),
    "first_class": (180000, 80000),
}

DEMAND_MULTIPLIER_FLOOR = 0.8
DEMAND_MULTIPLIER_SLOPE = 0.4

# TODO: derive the projection from the optimal fares and the cabin seat mix.
REVENUE_PROJECTION = (2500000, 3200000, 4100000)

PRICING_RECOMMENDATIONS = (
    "Increase economy pricing by 8%",
    "Maintain business class rates",
    "Reduce first class by 5%",
)


def draw_base_fares(rng: Optional[random.Random] = None) -> BaseFares:
    rng = rng or random.Random()
    fares = {
        cabin: minimum + rng.random() * spread
        for cabin, (minimum, spread) in BASE_FARE_RANGES.items()
    }
    return BaseFares(**fares)


def demand_multiplier(predicted_demand: float) -> float:
    """Linear fare scaling: 0.8 at zero demand, 1.2 at full utilization."""
    return DEMAND_MULTIPLIER_FLOOR + DEMAND_MULTIPLIER_SLOPE * predicted_demand


def calculate_optimal_pricing(
    market: MarketSnapshot,
    competitors: List[CompetitorSnapshot],
    demand: DemandForecast,
    base_fares: Optional[BaseFares] = None,
    currency: str = "BDT",
    rng: Optional[random.Random] = None,
) -> PricingAnalysis:
    """
    Compute per-cabin optimal prices for a flight.

    Args:
        market: Seasonality / competition snapshot for the route
        competitors: Competitor fares on the route
        demand: Forecast utilization (0-1) and confidence
        base_fares: Baseline fares; drawn from the simulated ranges when omitted
        currency: Currency code for the revenue projection
        rng: Random source for the simulated baseline fares

    Returns:
        PricingAnalysis with integer per-cabin prices
    """
    fares = base_fares or draw_base_fares(rng)
    multiplier = demand_multiplier(demand.predicted)

    optimal = CabinPrices(
        economy=round_half_up(fares.economy * multiplier),
        business=round_half_up(fares.business * multiplier),
        first_class=round_half_up(fares.first_class * multiplier),
    )

    logger.debug(
        "Optimal pricing calculated",
        demand=demand.predicted,
        multiplier=multiplier,
        economy=optimal.economy,
        competitors=len(competitors),
    )

    low, expected, high = REVENUE_PROJECTION
    return PricingAnalysis(
        optimal=optimal,
        revenue_projection=RevenueProjection(low=low, expected=expected, high=high, currency=currency),
        recommendations=list(PRICING_RECOMMENDATIONS),
        demand_multiplier=round(multiplier, 4),
        market={
            "competitiveness": "Strong",
            "positioning": "Premium",
            "opportunities": ["Early bird discounts", "Group booking incentives"],
            "snapshot": market.to_dict(),
        },
        demand=demand,
        competitors=list(competitors),
    )
