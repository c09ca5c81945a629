"""
Pydantic Schemas for API Request/Response

Request bodies and responses use camelCase on the wire; Python code uses the
snake_case field names.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime, date, timedelta, timezone
import math
import re

from airops.models.flight import AircraftType, DelayReason, FlightStatus, FuelStatus
from airops.models.ticket import DemandLevel, Season, Ticket, CABIN_CLASSES
from airops.models.login_activity import LoginFailureReason
from airops.models.user import UserRole


FLIGHT_NUMBER_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{3,4}$")
PLATFORM_PATTERN = re.compile(r"^[A-Z][0-9]{1,2}$")
EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
PASSWORD_STRENGTH_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
MIN_ADMIN_AGE = 18
MAX_ADMIN_AGE = 100

ECONOMY_SHARE = 0.7
BUSINESS_SHARE = 0.25
DEFAULT_FARE_VALIDITY_DAYS = 30


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== Auth Schemas ====================

def _validate_name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError("must be at least 2 characters")
    if len(value) > 50:
        raise ValueError("cannot exceed 50 characters")
    if not NAME_PATTERN.match(value):
        raise ValueError("can only contain letters and spaces")
    return value


def _validate_password_strength(value: str) -> str:
    if not PASSWORD_STRENGTH_PATTERN.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return value


def _validate_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please enter a valid email")
    return value


def _validate_birth_date(value: date) -> date:
    today = date.today()
    if value >= today:
        raise ValueError("Date of birth must be in the past")
    age = today.year - value.year - ((today.month, today.day) < (value.month, value.day))
    if not MIN_ADMIN_AGE <= age <= MAX_ADMIN_AGE:
        raise ValueError(f"Age must be between {MIN_ADMIN_AGE} and {MAX_ADMIN_AGE} years")
    return value


class RegisterRequest(CamelModel):
    first_name: str
    last_name: str
    email: str
    date_of_birth: date
    password: str = Field(min_length=6)

    @field_validator("first_name", "last_name")
    @classmethod
    def check_names(cls, v: str) -> str:
        return _validate_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("date_of_birth")
    @classmethod
    def check_dob(cls, v: date) -> date:
        return _validate_birth_date(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password_strength(v)


class LoginRequest(CamelModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileUpdateRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[date] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def check_names(cls, v: Optional[str]) -> Optional[str]:
        return _validate_name(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        return _validate_email(v) if v is not None else v

    @field_validator("date_of_birth")
    @classmethod
    def check_dob(cls, v: Optional[date]) -> Optional[date]:
        return _validate_birth_date(v) if v is not None else v


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _validate_password_strength(v)


class UserResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    date_of_birth: date
    role: UserRole
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginActivityResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: Optional[str] = None
    email: str
    login_time: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    success: bool
    failure_reason: Optional[LoginFailureReason] = None
    logout_time: Optional[datetime] = None


# ==================== Flight Schemas ====================

def _upper_stripped(value: Any) -> Any:
    return value.strip().upper() if isinstance(value, str) else value


class PassengerCounts(CamelModel):
    total: int = Field(ge=0, le=500)
    economy: Optional[int] = Field(default=None, ge=0)
    business: Optional[int] = Field(default=None, ge=0)
    first_class: Optional[int] = Field(default=None, ge=0)

    def with_distribution(self) -> "PassengerCounts":
        """Fill missing cabin counts: 70% economy, 25% business, remainder first class."""
        if not self.total:
            return self
        economy = self.economy or math.floor(self.total * ECONOMY_SHARE)
        business = self.business or math.floor(self.total * BUSINESS_SHARE)
        first_class = self.first_class or (self.total - economy - business)
        return PassengerCounts(
            total=self.total,
            economy=economy,
            business=business,
            first_class=max(first_class, 0),
        )


class DelayInfo(CamelModel):
    duration: Optional[int] = Field(default=None, ge=0, le=1440)
    reason: Optional[DelayReason] = None


class FlightCreate(CamelModel):
    flight_number: str
    airline: str = "International Airlines"
    aircraft: AircraftType
    origin: str = Field(min_length=1, max_length=100)
    destination: str = Field(min_length=1, max_length=100)
    transit_points: List[str] = Field(default_factory=list)
    departure_time: datetime
    arrival_time: datetime
    platform: str
    status: FlightStatus = FlightStatus.SCHEDULED
    delay: Optional[DelayInfo] = None
    passengers: PassengerCounts
    fuel_status: FuelStatus = FuelStatus.PENDING

    @field_validator("flight_number", "platform", mode="before")
    @classmethod
    def uppercase(cls, v: Any) -> Any:
        return _upper_stripped(v)

    @field_validator("flight_number")
    @classmethod
    def check_flight_number(cls, v: str) -> str:
        if not FLIGHT_NUMBER_PATTERN.match(v):
            raise ValueError("Flight number must be in format: AB123 or AB1234")
        return v

    @field_validator("platform")
    @classmethod
    def check_platform(cls, v: str) -> str:
        if not PLATFORM_PATTERN.match(v):
            raise ValueError("Platform must be in format: A1, B12, etc.")
        return v

    @field_validator("origin", "destination")
    @classmethod
    def strip_city(cls, v: str) -> str:
        return v.strip()

    @field_validator("departure_time", "arrival_time")
    @classmethod
    def normalize_time(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    @field_validator("departure_time")
    @classmethod
    def departure_in_future(cls, v: datetime) -> datetime:
        if v <= datetime.utcnow():
            raise ValueError("Departure time must be in the future")
        return v

    @model_validator(mode="after")
    def check_schedule(self) -> "FlightCreate":
        if self.arrival_time <= self.departure_time:
            raise ValueError("Arrival time must be after departure time")
        self.passengers = self.passengers.with_distribution()
        return self


class FlightUpdate(CamelModel):
    """Allow-listed editable flight fields; anything else in the body is ignored."""
    flight_number: Optional[str] = None
    airline: Optional[str] = None
    aircraft: Optional[AircraftType] = None
    origin: Optional[str] = Field(default=None, min_length=1, max_length=100)
    destination: Optional[str] = Field(default=None, min_length=1, max_length=100)
    transit_points: Optional[List[str]] = None
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    platform: Optional[str] = None
    status: Optional[FlightStatus] = None
    delay: Optional[DelayInfo] = None
    passengers: Optional[PassengerCounts] = None
    fuel_status: Optional[FuelStatus] = None

    @field_validator("flight_number", "platform", mode="before")
    @classmethod
    def uppercase(cls, v: Any) -> Any:
        return _upper_stripped(v)

    @field_validator("flight_number")
    @classmethod
    def check_flight_number(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not FLIGHT_NUMBER_PATTERN.match(v):
            raise ValueError("Flight number must be in format: AB123 or AB1234")
        return v

    @field_validator("platform")
    @classmethod
    def check_platform(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not PLATFORM_PATTERN.match(v):
            raise ValueError("Platform must be in format: A1, B12, etc.")
        return v

    @field_validator("departure_time", "arrival_time")
    @classmethod
    def normalize_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class FlightStatusUpdate(CamelModel):
    status: FlightStatus
    delay: Optional[DelayInfo] = None


class FlightResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    flight_number: str
    airline: str
    aircraft: AircraftType
    origin: str
    destination: str
    transit_points: List[str] = Field(default_factory=list)
    departure_time: datetime
    arrival_time: datetime
    platform: str
    status: FlightStatus
    delay: Optional[DelayInfo] = None
    passengers: PassengerCounts
    fuel_status: Optional[FuelStatus] = None
    duration: Optional[int] = None
    is_delayed: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("transit_points", mode="before")
    @classmethod
    def default_transit(cls, v: Any) -> Any:
        return v or []


# ==================== Ticket Schemas ====================

class CabinPrice(CamelModel):
    base: float = Field(ge=0)
    current: float = Field(ge=0)
    currency: str = "BDT"


class TicketPricing(CamelModel):
    economy: CabinPrice
    business: CabinPrice
    first_class: CabinPrice


class TicketFactors(CamelModel):
    distance: Optional[float] = Field(default=None, ge=0)
    demand: DemandLevel = DemandLevel.MEDIUM
    season: Season = Season.REGULAR
    fuel_cost: Optional[float] = Field(default=None, ge=0)


class TicketRoute(CamelModel):
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)


class TicketCreate(CamelModel):
    flight_number: str
    route: Optional[TicketRoute] = None
    aircraft: Optional[str] = None
    pricing: TicketPricing
    factors: TicketFactors = Field(default_factory=TicketFactors)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True

    @field_validator("flight_number", mode="before")
    @classmethod
    def uppercase(cls, v: Any) -> Any:
        return _upper_stripped(v)

    @field_validator("valid_from", "valid_until")
    @classmethod
    def normalize_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    def resolved_valid_until(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.utcnow()
        return self.valid_until or now + timedelta(days=DEFAULT_FARE_VALIDITY_DAYS)


class TicketUpdate(CamelModel):
    """Allow-listed editable fare sheet fields."""
    route: Optional[TicketRoute] = None
    aircraft: Optional[str] = None
    pricing: Optional[TicketPricing] = None
    factors: Optional[TicketFactors] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: Optional[bool] = None

    @field_validator("valid_from", "valid_until")
    @classmethod
    def normalize_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class TicketPricingUpdate(CamelModel):
    pricing: TicketPricing
    factors: Optional[TicketFactors] = None


class TicketResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    flight_number: str
    route: TicketRoute
    aircraft: str
    pricing: TicketPricing
    factors: TicketFactors
    valid_from: Optional[datetime] = None
    valid_until: datetime
    is_active: bool = True
    last_updated: Optional[datetime] = None
    updated_by: Optional[str] = None
    price_change: Dict[str, float] = Field(default_factory=dict)
    pricing_valid: bool = False

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> "TicketResponse":
        response = cls.model_validate(ticket)
        response.price_change = {
            to_camel(cabin): ticket.get_price_change(cabin) for cabin in CABIN_CLASSES
        }
        response.pricing_valid = ticket.is_valid_pricing()
        return response


# ==================== AI / Analysis Schemas ====================

class RouteSafetyRequest(CamelModel):
    origin: Optional[str] = None
    destination: Optional[str] = None
    departure_date: Optional[str] = None
    aircraft: Optional[str] = None


class DynamicPricingRequest(CamelModel):
    flight_number: Optional[str] = None
    route: Optional[str] = None
    aircraft: Optional[str] = None
    departure_date: Optional[str] = None
    current_demand: DemandLevel = DemandLevel.MEDIUM


class DelayPredictionRequest(CamelModel):
    flight_number: Optional[str] = None
    departure_time: Optional[str] = None
    aircraft: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None


class PassengerFlowRequest(CamelModel):
    terminal_id: Optional[str] = None
    time_slot: Optional[str] = None
    expected_passengers: Optional[int] = Field(default=None, ge=0)
    flight_schedule: Optional[List[Any]] = None


class MaintenancePredictionRequest(CamelModel):
    aircraft: Optional[str] = None
    flight_hours: float = Field(default=0, ge=0)
    last_maintenance: Optional[str] = None
    flight_history: Optional[List[Any]] = None


class MultipleCitiesRequest(CamelModel):
    cities: Optional[List[str]] = None
