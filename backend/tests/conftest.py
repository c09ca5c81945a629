"""
Pytest Configuration and Fixtures

Shared fixtures for the AirOps API and engine tests.
"""
import asyncio
import os
import random
import tempfile
import uuid
from datetime import datetime, timedelta

import pytest

# Settings are read once at import time, so the environment must be set first
_TEST_DIR = tempfile.mkdtemp(prefix="airops-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["WEATHER_API_KEY"] = ""
os.environ["LOG_FORMAT"] = "console"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import update  # noqa: E402

from airops.analysis.types import (  # noqa: E402
    AirspaceAssessment,
    RouteHistory,
    RouteWeather,
    SecurityLevel,
    WeatherSnapshot,
)
from airops.db.database import build_engine  # noqa: E402
from airops.main import app  # noqa: E402
from airops.models.user import User, UserRole  # noqa: E402

ADMIN_PASSWORD = "Secret123"


# =============================================================================
# Engine Input Fixtures
# =============================================================================

@pytest.fixture
def rng():
    """Seeded random source so simulated signals are repeatable."""
    return random.Random(1234)


@pytest.fixture
def clear_weather():
    clear = WeatherSnapshot(condition="Clear", visibility_km=10, wind_speed_ms=5, temperature_c=25)
    return RouteWeather(origin=clear, destination=clear)


@pytest.fixture
def perfect_history():
    return RouteHistory(
        total_flights=40,
        on_time_rate=100.0,
        delay_rate=0.0,
        cancellation_rate=0.0,
        average_delay=0.0,
    )


@pytest.fixture
def quiet_airspace():
    return AirspaceAssessment(security_level=SecurityLevel.LOW)


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def client():
    """Test client with the application lifespan (tables created on startup)."""
    with TestClient(app) as test_client:
        yield test_client


def register_admin(client, email=None, password=ADMIN_PASSWORD):
    email = email or f"admin-{uuid.uuid4().hex[:8]}@example.com"
    response = client.post("/api/auth/register", json={
        "firstName": "Test",
        "lastName": "Admin",
        "email": email,
        "dateOfBirth": "1990-05-17",
        "password": password,
    })
    assert response.status_code == 201, response.text
    return email


def login(client, email, password=ADMIN_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture(scope="session")
def admin_email(client):
    return register_admin(client)


@pytest.fixture(scope="session")
def auth_headers(client, admin_email):
    response = login(client, admin_email)
    assert response.status_code == 200, response.text
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


def flight_payload(flight_number, **overrides):
    departure = datetime.utcnow() + timedelta(days=3)
    payload = {
        "flightNumber": flight_number,
        "aircraft": "Boeing 777",
        "origin": "Dhaka",
        "destination": "Dubai",
        "departureTime": departure.isoformat(),
        "arrivalTime": (departure + timedelta(hours=5, minutes=30)).isoformat(),
        "platform": "A1",
        "passengers": {"total": 200},
    }
    payload.update(overrides)
    return payload


def ticket_pricing(economy=30000, business=75000, first_class=120000, markup=0.1):
    def cabin(base):
        return {"base": base, "current": base * (1 + markup)}

    return {
        "economy": cabin(economy),
        "business": cabin(business),
        "firstClass": cabin(first_class),
    }


@pytest.fixture
def new_flight_payload():
    return flight_payload


@pytest.fixture
def new_ticket_pricing():
    return ticket_pricing


@pytest.fixture
def new_admin(client):
    """Register a fresh admin; returns its email."""
    return lambda: register_admin(client)


@pytest.fixture
def login_as(client):
    return lambda email, password=ADMIN_PASSWORD: login(client, email, password)


async def _set_role(email, role):
    # Own engine: the app's pool is bound to the TestClient's event loop
    engine = build_engine(os.environ["DATABASE_URL"])
    try:
        async with engine.begin() as conn:
            await conn.execute(update(User).where(User.email == email).values(role=role))
    finally:
        await engine.dispose()


@pytest.fixture
def promote_to_super_admin():
    return lambda email: asyncio.run(_set_role(email, UserRole.SUPER_ADMIN))
