"""
Database initialization script for AirOps
Creates tables and seeds an admin account, sample flights and fare sheets
for development
"""
import asyncio
import os
import random
import sys
from datetime import datetime, timedelta, date
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from airops.db.database import close_db, init_db as create_tables, session_scope
from airops.models.flight import Flight, FlightStatus, AircraftType, DelayReason, FuelStatus
from airops.models.user import User, UserRole
from airops.config import settings
from airops.security import hash_password
from airops.tools.fare_tools import build_sample_ticket

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@airops.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "Admin1234")

FLIGHT_PREFIX = "IA"

# (origin, destination, aircraft, platform, block hours)
SAMPLE_ROUTES = [
    ("Dhaka", "Dubai", AircraftType.BOEING_777, "A1", 5.5),
    ("Dubai", "Dhaka", AircraftType.BOEING_777, "A2", 5.0),
    ("Dhaka", "Singapore", AircraftType.AIRBUS_A330, "B4", 4.0),
    ("Singapore", "Dhaka", AircraftType.AIRBUS_A330, "B5", 4.0),
    ("Dhaka", "London", AircraftType.BOEING_787, "C1", 11.0),
    ("London", "Dhaka", AircraftType.BOEING_787, "C2", 10.5),
    ("Dhaka", "Kolkata", AircraftType.AIRBUS_A320, "D3", 1.0),
    ("Kolkata", "Dhaka", AircraftType.AIRBUS_A320, "D4", 1.0),
    ("Dhaka", "Istanbul", AircraftType.AIRBUS_A350, "E1", 8.5),
    ("Chittagong", "Doha", AircraftType.BOEING_737, "F2", 6.0),
]

PAST_STATUSES = [
    FlightStatus.ON_TIME,
    FlightStatus.ON_TIME,
    FlightStatus.ON_TIME,
    FlightStatus.DELAYED,
    FlightStatus.ARRIVED,
    FlightStatus.CANCELLED,
]


async def init_db(reset: bool = False):
    """Create tables and seed development data"""
    if reset:
        print("🗑️ Dropping existing tables...")
    print("📦 Creating ORM tables...")
    await create_tables(reset=reset)
    print("✅ All ORM tables created")

    rng = random.Random(42)
    async with session_scope() as session:
        admin = await seed_admin(session)

        print("✈️ Seeding flights...")
        flights = await seed_flights(session, admin, rng)

        print("💺 Seeding fare sheets...")
        await seed_tickets(session, flights, rng)

    await close_db()
    print("\n✅ Database initialization complete!\n")


async def seed_admin(session: AsyncSession) -> User:
    """Create the default super admin unless it already exists"""
    result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
    admin = result.scalar_one_or_none()
    if admin:
        print(f"  ⏭️ Admin {ADMIN_EMAIL} already exists")
        return admin

    admin = User(
        id=str(uuid4()),
        first_name="System",
        last_name="Admin",
        email=ADMIN_EMAIL,
        date_of_birth=date(1985, 1, 1),
        password_hash=hash_password(ADMIN_PASSWORD),
        role=UserRole.SUPER_ADMIN,
    )
    session.add(admin)
    await session.commit()
    print(f"  ✅ Created admin {ADMIN_EMAIL}")
    return admin


async def seed_flights(session: AsyncSession, admin: User, rng: random.Random) -> list:
    """Seed a week of flown history and a week of upcoming departures per route"""
    existing = set((await session.execute(select(Flight.flight_number))).scalars().all())
    now = datetime.utcnow().replace(minute=0, second=0, microsecond=0)

    flights = []
    for index, (origin, destination, aircraft, platform, hours) in enumerate(SAMPLE_ROUTES):
        for day_offset in range(-7, 8):
            # IA1000-IA1914: route index in the hundreds, departure day in the units
            flight_number = f"{FLIGHT_PREFIX}{1000 + index * 100 + day_offset + 7}"
            if flight_number in existing:
                continue
            existing.add(flight_number)

            departure = now + timedelta(days=day_offset, hours=rng.randint(0, 20))
            status = rng.choice(PAST_STATUSES) if day_offset < 0 else FlightStatus.SCHEDULED
            delayed = status == FlightStatus.DELAYED
            total = rng.randint(120, 400)

            flights.append(Flight(
                id=str(uuid4()),
                flight_number=flight_number,
                airline=settings.airline_name,
                aircraft=aircraft,
                origin=origin,
                destination=destination,
                transit_points=[],
                departure_time=departure,
                arrival_time=departure + timedelta(hours=hours),
                platform=platform,
                status=status,
                delay_minutes=rng.randint(15, 180) if delayed else None,
                delay_reason=rng.choice(list(DelayReason)) if delayed else None,
                fuel_status=FuelStatus.FUELED if day_offset < 0 else FuelStatus.PENDING,
                passengers_total=total,
                passengers_economy=int(total * 0.7),
                passengers_business=int(total * 0.25),
                passengers_first_class=total - int(total * 0.7) - int(total * 0.25),
                created_by=admin.id,
            ))

    session.add_all(flights)
    await session.commit()
    print(f"  ✅ Created {len(flights)} flights")
    return flights


async def seed_tickets(session: AsyncSession, flights: list, rng: random.Random):
    """One fare sheet per non-cancelled seeded flight"""
    tickets = [
        build_sample_ticket(flight, rng=rng, currency=settings.currency)
        for flight in flights
        if flight.status != FlightStatus.CANCELLED
    ]
    session.add_all(tickets)
    await session.commit()
    print(f"  ✅ Created {len(tickets)} fare sheets")


if __name__ == "__main__":
    asyncio.run(init_db(reset="--reset" in sys.argv))
