"""
Value types exchanged between the data adapters and the scoring engines.

All types are immutable and created fresh per request.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class SecurityLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


# ==================== Safety inputs ====================

@dataclass(frozen=True)
class WeatherSnapshot:
    """Normalized current conditions for one city."""
    condition: str
    visibility_km: float
    wind_speed_ms: float
    temperature_c: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition,
            "visibility": self.visibility_km,
            "windSpeed": self.wind_speed_ms,
            "temperature": self.temperature_c,
        }


FALLBACK_WEATHER = WeatherSnapshot(
    condition="Unknown",
    visibility_km=10.0,
    wind_speed_ms=5.0,
    temperature_c=25.0,
)


@dataclass(frozen=True)
class RouteWeather:
    origin: WeatherSnapshot
    destination: WeatherSnapshot

    @property
    def legs(self) -> List[WeatherSnapshot]:
        return [self.origin, self.destination]


@dataclass(frozen=True)
class RouteHistory:
    """Trailing-window aggregate of a city pair's punctuality."""
    total_flights: int
    on_time_rate: Optional[float]
    delay_rate: float
    cancellation_rate: float
    average_delay: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFlights": self.total_flights,
            "onTimeRate": self.on_time_rate,
            "delayRate": self.delay_rate,
            "cancellationRate": self.cancellation_rate,
            "averageDelay": self.average_delay,
        }


BASELINE_ROUTE_HISTORY = RouteHistory(
    total_flights=100,
    on_time_rate=92.0,
    delay_rate=6.0,
    cancellation_rate=2.0,
    average_delay=15.0,
)


@dataclass(frozen=True)
class AirspaceAssessment:
    security_level: SecurityLevel
    risk_factors: List[str] = field(default_factory=list)
    alternative_routes_required: bool = False

    @property
    def airspace_restrictions(self) -> str:
        return "Moderate" if self.risk_factors else "Low"


# ==================== Safety outputs ====================

@dataclass(frozen=True)
class SafetyAnalysis:
    overall_score: int
    risk_level: RiskLevel
    weather: Dict[str, Any]
    air_traffic: Dict[str, Any]
    geopolitical: Dict[str, Any]
    technical: Dict[str, Any]
    historical: Dict[str, Any]
    recommendations: List[str]

    def categories(self) -> Dict[str, Any]:
        return {
            "weather": self.weather,
            "airTraffic": self.air_traffic,
            "geopolitical": self.geopolitical,
            "technical": self.technical,
            "historical": self.historical,
        }


@dataclass(frozen=True)
class AlternativeRoute:
    route: str
    transit: str
    safety_score: int
    additional_time_hours: float
    cost: str = "Medium"
    advantages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route": self.route,
            "transit": self.transit,
            "safetyScore": self.safety_score,
            "additionalTime": self.additional_time_hours,
            "cost": self.cost,
            "advantages": list(self.advantages),
        }


# ==================== Pricing ====================

@dataclass(frozen=True)
class MarketSnapshot:
    seasonality: str
    competition: int
    market_share: float
    price_elasticity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seasonality": self.seasonality,
            "competition": self.competition,
            "marketShare": self.market_share,
            "priceElasticity": self.price_elasticity,
        }


@dataclass(frozen=True)
class CompetitorSnapshot:
    airline: str
    economy_price: float
    business_price: float
    first_class_price: float
    market_position: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "airline": self.airline,
            "economyPrice": self.economy_price,
            "businessPrice": self.business_price,
            "firstClassPrice": self.first_class_price,
            "marketPosition": self.market_position,
        }


@dataclass(frozen=True)
class DemandForecast:
    predicted: float
    confidence: float
    factors: List[str] = field(default_factory=list)
    peak_days: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predicted": self.predicted,
            "confidence": self.confidence,
            "factors": list(self.factors),
            "peakDays": list(self.peak_days),
        }


@dataclass(frozen=True)
class BaseFares:
    economy: float
    business: float
    first_class: float


@dataclass(frozen=True)
class CabinPrices:
    economy: int
    business: int
    first_class: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "economy": self.economy,
            "business": self.business,
            "firstClass": self.first_class,
        }


@dataclass(frozen=True)
class RevenueProjection:
    low: int
    expected: int
    high: int
    currency: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "low": self.low,
            "expected": self.expected,
            "high": self.high,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class PricingAnalysis:
    optimal: CabinPrices
    revenue_projection: RevenueProjection
    recommendations: List[str]
    demand_multiplier: float
    market: Dict[str, Any]
    demand: DemandForecast
    competitors: List[CompetitorSnapshot]
