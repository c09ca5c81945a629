"""
Report Tools

Daily, weekly, monthly, performance and financial rollups over stored
flights, tickets and login activity.
"""
from typing import Dict, Any, List, Optional, Iterable
from datetime import datetime, timedelta, date
from collections import Counter

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from airops.analysis.rounding import percentage, round_half_up
from airops.models.flight import Flight, FlightStatus
from airops.models.login_activity import LoginActivity
from airops.models.ticket import Ticket, CABIN_CLASSES

CABIN_KEYS = {"economy": "economy", "business": "business", "first_class": "firstClass"}


# ==================== Aggregation helpers ====================

def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def count_status(flights: Iterable[Flight], status: FlightStatus) -> int:
    return sum(1 for f in flights if f.status == status)


def on_time_percentage(flights: List[Flight]) -> int:
    return percentage(count_status(flights, FlightStatus.ON_TIME), len(flights))


def passenger_totals(flights: Iterable[Flight]) -> Dict[str, int]:
    totals = {"total": 0, "economy": 0, "business": 0, "firstClass": 0}
    for f in flights:
        totals["total"] += f.passengers_total or 0
        totals["economy"] += f.passengers_economy or 0
        totals["business"] += f.passengers_business or 0
        totals["firstClass"] += f.passengers_first_class or 0
    return totals


def status_breakdown(flights: Iterable[Flight]) -> Dict[str, int]:
    return dict(Counter(_enum_value(f.status) for f in flights))


def aircraft_breakdown(flights: Iterable[Flight]) -> Dict[str, int]:
    return dict(Counter(_enum_value(f.aircraft) for f in flights))


def average_delay(flights: Iterable[Flight]) -> int:
    delays = [f.delay_minutes for f in flights if f.delay_minutes]
    if not delays:
        return 0
    return round_half_up(sum(delays) / len(delays))


def performance_by(flights: Iterable[Flight], key) -> Dict[str, Dict[str, int]]:
    """Per-group punctuality counts; ``key`` maps a flight to its group label."""
    groups: Dict[str, Dict[str, int]] = {}
    for f in flights:
        perf = groups.setdefault(key(f), {"total": 0, "onTime": 0, "delayed": 0, "cancelled": 0})
        perf["total"] += 1
        if f.status == FlightStatus.ON_TIME:
            perf["onTime"] += 1
        elif f.status == FlightStatus.DELAYED:
            perf["delayed"] += 1
        elif f.status == FlightStatus.CANCELLED:
            perf["cancelled"] += 1

    for perf in groups.values():
        perf["onTimePercentage"] = percentage(perf["onTime"], perf["total"])
    return groups


def _day_bounds(now: datetime) -> tuple:
    start = datetime.combine(now.date(), datetime.min.time())
    return start, start + timedelta(days=1)


def _month_ago(today: date) -> date:
    year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
    for day in (today.day, 30, 29, 28):
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return date(year, month, 28)


async def _flights_between(db: AsyncSession, start: datetime, end: datetime) -> List[Flight]:
    result = await db.execute(
        select(Flight).where(Flight.departure_time >= start, Flight.departure_time < end)
    )
    return list(result.scalars().all())


# ==================== Reports ====================

async def build_daily_report(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    start, end = _day_bounds(now)

    flights = await _flights_between(db, start, end)
    logins = (await db.execute(
        select(LoginActivity).where(LoginActivity.login_time >= start, LoginActivity.login_time < end)
    )).scalars().all()
    tickets = (await db.execute(
        select(Ticket).where(Ticket.last_updated >= start, Ticket.last_updated < end)
    )).scalars().all()

    successful = sum(1 for a in logins if a.success)
    return {
        "date": start.date().isoformat(),
        "flights": {
            "total": len(flights),
            "scheduled": count_status(flights, FlightStatus.SCHEDULED),
            "onTime": count_status(flights, FlightStatus.ON_TIME),
            "delayed": count_status(flights, FlightStatus.DELAYED),
            "cancelled": count_status(flights, FlightStatus.CANCELLED),
            "departed": count_status(flights, FlightStatus.DEPARTED),
        },
        "passengers": passenger_totals(flights),
        "loginActivities": {
            "total": len(logins),
            "successful": successful,
            "failed": len(logins) - successful,
        },
        "tickets": {
            "total": len(tickets),
            "active": sum(1 for t in tickets if t.is_active),
        },
        "performance": {"onTimePercentage": on_time_percentage(flights)},
        "generatedAt": datetime.utcnow().isoformat(),
    }


async def build_weekly_report(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    week_ago = now - timedelta(days=7)
    flights = await _flights_between(db, week_ago, now)
    passengers = passenger_totals(flights)["total"]

    return {
        "period": {"from": week_ago.date().isoformat(), "to": now.date().isoformat()},
        "flights": {
            "total": len(flights),
            "dailyAverage": round_half_up(len(flights) / 7),
            "statusBreakdown": status_breakdown(flights),
        },
        "passengers": {
            "total": passengers,
            "dailyAverage": round_half_up(passengers / 7),
        },
        "performance": {"onTimePercentage": on_time_percentage(flights)},
        "generatedAt": datetime.utcnow().isoformat(),
    }


async def build_monthly_report(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    month_ago = datetime.combine(_month_ago(now.date()), now.time())
    flights = await _flights_between(db, month_ago, now)
    passengers = passenger_totals(flights)

    return {
        "period": {"from": month_ago.date().isoformat(), "to": now.date().isoformat()},
        "flights": {
            "total": len(flights),
            "statusBreakdown": status_breakdown(flights),
            "aircraftBreakdown": aircraft_breakdown(flights),
        },
        "passengers": {
            "total": passengers["total"],
            "classBreakdown": {
                "economy": passengers["economy"],
                "business": passengers["business"],
                "firstClass": passengers["firstClass"],
            },
        },
        "performance": {
            "onTimePercentage": on_time_percentage(flights),
            "averageDelay": average_delay(flights),
        },
        "generatedAt": datetime.utcnow().isoformat(),
    }


async def build_performance_report(db: AsyncSession) -> Dict[str, Any]:
    flights = list((await db.execute(select(Flight))).scalars().all())

    return {
        "overall": {
            "totalFlights": len(flights),
            "onTimePercentage": on_time_percentage(flights),
            "cancellationRate": percentage(count_status(flights, FlightStatus.CANCELLED), len(flights)),
        },
        "byAircraft": performance_by(flights, lambda f: _enum_value(f.aircraft)),
        "byRoute": performance_by(flights, lambda f: f.route),
        "trends": {
            "last7Days": [],
            "last30Days": [],
            "note": "Trend analysis requires more historical data",
        },
        "generatedAt": datetime.utcnow().isoformat(),
    }


def summarize_revenue(tickets: List[Ticket], flights: List[Flight], currency: str) -> Dict[str, Any]:
    """Estimated revenue: booked passengers per cabin times the current fare."""
    flights_by_number = {f.flight_number: f for f in flights}
    revenue = {cabin: 0.0 for cabin in CABIN_CLASSES}

    for ticket in tickets:
        flight = flights_by_number.get(ticket.flight_number)
        if not flight:
            continue
        for cabin in CABIN_CLASSES:
            seats = getattr(flight, f"passengers_{cabin}") or 0
            revenue[cabin] += seats * (getattr(ticket, f"{cabin}_current") or 0)

    def _average(cabin: str) -> int:
        if not tickets:
            return 0
        return round_half_up(sum(getattr(t, f"{cabin}_current") or 0 for t in tickets) / len(tickets))

    return {
        "revenue": {
            "total": sum(revenue.values()),
            "byClass": {CABIN_KEYS[cabin]: amount for cabin, amount in revenue.items()},
            "currency": currency,
        },
        "tickets": {
            "total": len(tickets),
            "averagePrice": {CABIN_KEYS[cabin]: _average(cabin) for cabin in CABIN_CLASSES},
        },
    }


async def build_financial_report(db: AsyncSession, currency: str = "BDT") -> Dict[str, Any]:
    tickets = list((await db.execute(select(Ticket).where(Ticket.is_active == True))).scalars().all())  # noqa: E712
    flights = list((await db.execute(select(Flight))).scalars().all())

    report = summarize_revenue(tickets, flights, currency)
    report["generatedAt"] = datetime.utcnow().isoformat()
    return report
