"""
Market Tools

Simulated market, competitor and demand signals for dynamic pricing.
"""
import random
from typing import List, Optional

from airops.analysis.types import CompetitorSnapshot, DemandForecast, MarketSnapshot

COMPETITORS = ("Emirates", "Qatar Airways", "Turkish Airlines", "Singapore Airlines")


def get_market_analysis(route: str, rng: Optional[random.Random] = None) -> MarketSnapshot:
    rng = rng or random.Random()
    return MarketSnapshot(
        seasonality="Peak" if rng.random() > 0.5 else "Off-Peak",
        competition=rng.randint(3, 7),
        market_share=round(15 + rng.random() * 20, 1),
        price_elasticity=round(0.7 + rng.random() * 0.6, 2),
    )


def analyze_competitor_pricing(route: str, rng: Optional[random.Random] = None) -> List[CompetitorSnapshot]:
    rng = rng or random.Random()
    return [
        CompetitorSnapshot(
            airline=airline,
            economy_price=round(25000 + rng.random() * 50000),
            business_price=round(80000 + rng.random() * 100000),
            first_class_price=round(150000 + rng.random() * 150000),
            market_position="Premium" if rng.random() > 0.5 else "Budget",
        )
        for airline in COMPETITORS
    ]


def predict_demand(route: str, rng: Optional[random.Random] = None) -> DemandForecast:
    """Baseline 60-90% utilization scaled by a seasonal factor."""
    rng = rng or random.Random()
    baseline = 0.6 + rng.random() * 0.3
    if rng.random() > 0.7:
        seasonal = 1.2
    elif rng.random() > 0.3:
        seasonal = 1.0
    else:
        seasonal = 0.8

    return DemandForecast(
        predicted=round(min(1.0, baseline * seasonal), 3),
        confidence=round(0.75 + rng.random() * 0.2, 3),
        factors=["Seasonal patterns", "Historical booking data", "Economic indicators"],
        peak_days=["Friday", "Sunday", "Monday"],
    )
