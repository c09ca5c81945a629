"""Report aggregation and fare sheet tests."""
import random
import uuid
from datetime import date, datetime, timedelta

from airops.analysis.rounding import percentage, round_half_up
from airops.models.flight import AircraftType, Flight, FlightStatus
from airops.tools.fare_tools import build_sample_ticket
from airops.tools.report_tools import (
    _month_ago,
    aircraft_breakdown,
    average_delay,
    on_time_percentage,
    passenger_totals,
    performance_by,
    status_breakdown,
    summarize_revenue,
)


def _flight(number, status=FlightStatus.ON_TIME, aircraft=AircraftType.BOEING_737,
            origin="Dhaka", destination="Dubai", delay=None, total=100):
    departure = datetime(2026, 3, 1, 8, 0)
    return Flight(
        id=str(uuid.uuid4()),
        flight_number=number,
        aircraft=aircraft,
        origin=origin,
        destination=destination,
        departure_time=departure,
        arrival_time=departure + timedelta(hours=5),
        platform="A1",
        status=status,
        delay_minutes=delay,
        passengers_total=total,
        passengers_economy=70,
        passengers_business=25,
        passengers_first_class=5,
    )


FLIGHTS = [
    _flight("IA100"),
    _flight("IA101"),
    _flight("IA102", status=FlightStatus.DELAYED, delay=30),
    _flight("IA103", status=FlightStatus.DELAYED, delay=45, aircraft=AircraftType.AIRBUS_A320,
            origin="Dhaka", destination="Kolkata"),
    _flight("IA104", status=FlightStatus.CANCELLED, aircraft=AircraftType.AIRBUS_A320),
]


def test_round_half_up() -> None:
    assert round_half_up(47.5) == 48
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_percentage_of_empty_set_is_zero() -> None:
    assert percentage(0, 0) == 0
    assert on_time_percentage([]) == 0
    assert percentage(2, 3) == 67


def test_on_time_percentage() -> None:
    assert on_time_percentage(FLIGHTS) == 40


def test_breakdowns() -> None:
    assert status_breakdown(FLIGHTS) == {"On Time": 2, "Delayed": 2, "Cancelled": 1}
    assert aircraft_breakdown(FLIGHTS) == {"Boeing 737": 3, "Airbus A320": 2}


def test_passenger_totals() -> None:
    assert passenger_totals(FLIGHTS) == {"total": 500, "economy": 350, "business": 125, "firstClass": 25}


def test_average_delay_ignores_undelayed_flights() -> None:
    assert average_delay(FLIGHTS) == 38
    assert average_delay(FLIGHTS[:2]) == 0


def test_performance_by_route() -> None:
    by_route = performance_by(FLIGHTS, key=lambda f: f.route)

    assert by_route["Dhaka-Dubai"] == {
        "total": 4, "onTime": 2, "delayed": 1, "cancelled": 1, "onTimePercentage": 50,
    }
    assert by_route["Dhaka-Kolkata"]["onTimePercentage"] == 0


def test_month_ago_clamps_short_months() -> None:
    assert _month_ago(date(2026, 3, 31)) == date(2026, 2, 28)
    assert _month_ago(date(2026, 1, 15)) == date(2025, 12, 15)


def test_sample_ticket_fare_ladder() -> None:
    now = datetime(2026, 3, 1, 12, 0)
    ticket = build_sample_ticket(FLIGHTS[0], rng=random.Random(7), now=now)

    assert ticket.flight_number == "IA100"
    assert ticket.aircraft == "Boeing 737"
    assert ticket.business_base == ticket.economy_base * 2.5
    assert ticket.first_class_base == ticket.economy_base * 4
    assert ticket.economy_current >= ticket.economy_base
    assert ticket.valid_until == now + timedelta(days=30)
    assert ticket.is_valid_pricing(now=now + timedelta(days=1))
    assert not ticket.is_valid_pricing(now=now + timedelta(days=31))


def test_revenue_is_seats_times_current_fare() -> None:
    now = datetime(2026, 3, 1, 12, 0)
    ticket = build_sample_ticket(FLIGHTS[0], rng=random.Random(3), now=now)

    summary = summarize_revenue([ticket], FLIGHTS, "BDT")
    by_class = summary["revenue"]["byClass"]

    assert by_class["economy"] == 70 * ticket.economy_current
    assert by_class["firstClass"] == 5 * ticket.first_class_current
    assert summary["revenue"]["total"] == sum(by_class.values())
    assert summary["tickets"]["total"] == 1


def test_revenue_without_tickets() -> None:
    summary = summarize_revenue([], FLIGHTS, "BDT")

    assert summary["revenue"]["total"] == 0
    assert summary["tickets"]["averagePrice"] == {"economy": 0, "business": 0, "firstClass": 0}
