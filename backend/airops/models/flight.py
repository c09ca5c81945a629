"""
Flight Database Model
"""
from sqlalchemy import Column, String, Integer, DateTime, JSON, Enum as SQLEnum, ForeignKey
from datetime import datetime
from typing import Optional, Dict, Any
import enum

from airops.db.database import Base


class FlightStatus(str, enum.Enum):
    """Flight status enumeration."""
    SCHEDULED = "Scheduled"
    ON_TIME = "On Time"
    DELAYED = "Delayed"
    CANCELLED = "Cancelled"
    BOARDING = "Boarding"
    DEPARTED = "Departed"
    ARRIVED = "Arrived"


class DelayReason(str, enum.Enum):
    """Delay reason enumeration."""
    WEATHER = "Weather"
    TECHNICAL = "Technical"
    AIR_TRAFFIC = "Air Traffic"
    SECURITY = "Security"
    CREW = "Crew"
    OTHER = "Other"


class FuelStatus(str, enum.Enum):
    """Fuelling progress enumeration."""
    PENDING = "Pending"
    FUELING = "Fueling"
    FUELED = "Fueled"
    NOT_REQUIRED = "Not Required"


class AircraftType(str, enum.Enum):
    """Aircraft types operated by the fleet."""
    BOEING_737 = "Boeing 737"
    BOEING_777 = "Boeing 777"
    BOEING_787 = "Boeing 787"
    AIRBUS_A320 = "Airbus A320"
    AIRBUS_A330 = "Airbus A330"
    AIRBUS_A350 = "Airbus A350"


class Flight(Base):
    """Flight model representing a scheduled passenger service."""

    __tablename__ = "flights"

    id = Column(String(50), primary_key=True)
    flight_number = Column(String(10), nullable=False, unique=True, index=True)
    airline = Column(String(100), nullable=False, default="International Airlines")
    aircraft = Column(SQLEnum(AircraftType), nullable=False, index=True)
    origin = Column(String(100), nullable=False, index=True)
    destination = Column(String(100), nullable=False, index=True)
    transit_points = Column(JSON, default=list)

    # Schedule
    departure_time = Column(DateTime, nullable=False, index=True)
    arrival_time = Column(DateTime, nullable=False)
    platform = Column(String(3), nullable=False)

    # Status
    status = Column(SQLEnum(FlightStatus), default=FlightStatus.SCHEDULED, index=True)
    delay_minutes = Column(Integer, nullable=True)
    delay_reason = Column(SQLEnum(DelayReason), nullable=True)
    fuel_status = Column(SQLEnum(FuelStatus), default=FuelStatus.PENDING)

    # Passengers
    passengers_total = Column(Integer, nullable=False, default=0)
    passengers_economy = Column(Integer, default=0)
    passengers_business = Column(Integer, default=0)
    passengers_first_class = Column(Integer, default=0)

    # Metadata
    created_by = Column(String(50), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Flight {self.flight_number} {self.origin}-{self.destination} {self.departure_time}>"

    @property
    def passengers(self) -> Dict[str, int]:
        return {
            "total": self.passengers_total or 0,
            "economy": self.passengers_economy or 0,
            "business": self.passengers_business or 0,
            "first_class": self.passengers_first_class or 0,
        }

    @property
    def delay(self) -> Optional[Dict[str, Any]]:
        if self.delay_minutes is None and self.delay_reason is None:
            return None
        return {"duration": self.delay_minutes, "reason": self.delay_reason}

    @property
    def duration(self) -> Optional[int]:
        """Scheduled block time in minutes."""
        if self.departure_time and self.arrival_time:
            return round((self.arrival_time - self.departure_time).total_seconds() / 60)
        return None

    @property
    def is_delayed(self) -> bool:
        return self.status == FlightStatus.DELAYED and bool(self.delay_minutes)

    @property
    def route(self) -> str:
        return f"{self.origin}-{self.destination}"
