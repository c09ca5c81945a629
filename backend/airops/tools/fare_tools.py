"""
Fare Tools

Sample fare sheet generation for stored flights.
"""
import random
import uuid
from datetime import datetime, timedelta
from typing import Optional

from airops.models.flight import Flight
from airops.models.ticket import DemandLevel, Season, Ticket

FARE_VALIDITY_DAYS = 30
PER_KM_ECONOMY_FARE = 8
BUSINESS_FARE_FACTOR = 2.5
FIRST_CLASS_FARE_FACTOR = 4


def build_sample_ticket(
    flight: Flight,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    currency: str = "BDT",
) -> Ticket:
    """
    Fare sheet for a flight from a simulated distance.

    Economy base is 8 per km plus 15000-25000; business and first class are
    2.5x and 4x economy. Current prices sit a random markup above base.
    """
    rng = rng or random.Random()
    now = now or datetime.utcnow()

    distance = rng.randint(500, 5499)
    economy_base = distance * PER_KM_ECONOMY_FARE + rng.randint(0, 9999) + 15000
    business_base = economy_base * BUSINESS_FARE_FACTOR
    first_class_base = economy_base * FIRST_CLASS_FARE_FACTOR

    return Ticket(
        id=str(uuid.uuid4()),
        flight_number=flight.flight_number,
        origin=flight.origin,
        destination=flight.destination,
        aircraft=getattr(flight.aircraft, "value", flight.aircraft),
        economy_base=float(economy_base),
        economy_current=float(economy_base + rng.randint(0, 4999)),
        economy_currency=currency,
        business_base=float(business_base),
        business_current=float(business_base + rng.randint(0, 14999)),
        business_currency=currency,
        first_class_base=float(first_class_base),
        first_class_current=float(first_class_base + rng.randint(0, 24999)),
        first_class_currency=currency,
        distance=float(distance),
        demand=rng.choice(list(DemandLevel)),
        season=rng.choice(list(Season)),
        fuel_cost=float(rng.randint(30, 79)),
        valid_from=now,
        valid_until=now + timedelta(days=FARE_VALIDITY_DAYS),
        is_active=True,
        last_updated=now,
    )
