"""
Ticket (fare sheet) Database Model
"""
from sqlalchemy import Column, String, Float, DateTime, Boolean, Enum as SQLEnum, ForeignKey
from datetime import datetime
from typing import Dict, Any
import enum

from airops.db.database import Base


CABIN_CLASSES = ("economy", "business", "first_class")


class DemandLevel(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Season(str, enum.Enum):
    PEAK = "Peak"
    OFF_PEAK = "Off-Peak"
    REGULAR = "Regular"


class Ticket(Base):
    """Per-flight fare sheet with base and current price for each cabin."""

    __tablename__ = "tickets"

    id = Column(String(50), primary_key=True)
    flight_number = Column(String(10), nullable=False, index=True)
    origin = Column(String(100), nullable=False)
    destination = Column(String(100), nullable=False)
    aircraft = Column(String(50), nullable=False)

    # Pricing
    economy_base = Column(Float, nullable=False)
    economy_current = Column(Float, nullable=False)
    economy_currency = Column(String(3), default="BDT")
    business_base = Column(Float, nullable=False)
    business_current = Column(Float, nullable=False)
    business_currency = Column(String(3), default="BDT")
    first_class_base = Column(Float, nullable=False)
    first_class_current = Column(Float, nullable=False)
    first_class_currency = Column(String(3), default="BDT")

    # Pricing factors
    distance = Column(Float, nullable=True)
    demand = Column(SQLEnum(DemandLevel), default=DemandLevel.MEDIUM)
    season = Column(SQLEnum(Season), default=Season.REGULAR)
    fuel_cost = Column(Float, nullable=True)

    # Validity
    valid_from = Column(DateTime, default=datetime.utcnow)
    valid_until = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=True, index=True)

    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = Column(String(50), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def __repr__(self):
        return f"<Ticket {self.flight_number} {self.origin}-{self.destination}>"

    @property
    def route(self) -> Dict[str, str]:
        return {"origin": self.origin, "destination": self.destination}

    @property
    def pricing(self) -> Dict[str, Dict[str, Any]]:
        return {
            cabin: {
                "base": getattr(self, f"{cabin}_base"),
                "current": getattr(self, f"{cabin}_current"),
                "currency": getattr(self, f"{cabin}_currency") or "BDT",
            }
            for cabin in CABIN_CLASSES
        }

    @property
    def factors(self) -> Dict[str, Any]:
        return {
            "distance": self.distance,
            "demand": self.demand,
            "season": self.season,
            "fuel_cost": self.fuel_cost,
        }

    def get_price_change(self, cabin: str) -> float:
        """Percentage change of the current price against the base price."""
        base = getattr(self, f"{cabin}_base", None)
        current = getattr(self, f"{cabin}_current", None)
        if base and base > 0 and current is not None:
            return round((current - base) / base * 100, 2)
        return 0.0

    def is_valid_pricing(self, now: datetime = None) -> bool:
        now = now or datetime.utcnow()
        valid_from = self.valid_from or now
        return bool(self.is_active) and valid_from <= now <= self.valid_until
