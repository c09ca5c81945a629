"""
Flight API Routes
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional
from datetime import datetime, date, timedelta
import uuid
import structlog

from airops.api.deps import CurrentUser, get_current_user
from airops.api.responses import dump, pagination, success_response
from airops.db.database import get_db
from airops.models.flight import Flight, FlightStatus
from airops.schemas import (
    DelayInfo,
    FlightCreate,
    FlightResponse,
    FlightStatusUpdate,
    FlightUpdate,
    PassengerCounts,
)

logger = structlog.get_logger()
router = APIRouter()


def serialize_flight(flight: Flight) -> dict:
    return dump(FlightResponse.model_validate(flight))


def apply_passengers(flight: Flight, passengers: PassengerCounts) -> None:
    flight.passengers_total = passengers.total
    for cabin in ("economy", "business", "first_class"):
        count = getattr(passengers, cabin)
        if count is not None:
            setattr(flight, f"passengers_{cabin}", count)


def apply_delay(flight: Flight, delay: Optional[DelayInfo]) -> None:
    if delay is None:
        return
    flight.delay_minutes = delay.duration
    flight.delay_reason = delay.reason


async def _get_flight_or_404(db: AsyncSession, flight_id: str) -> Flight:
    result = await db.execute(select(Flight).where(Flight.id == flight_id))
    flight = result.scalar_one_or_none()
    if not flight:
        raise HTTPException(status_code=404, detail="Flight not found")
    return flight


async def _flight_number_taken(db: AsyncSession, flight_number: str, exclude_id: Optional[str] = None) -> bool:
    query = select(Flight.id).where(Flight.flight_number == flight_number)
    if exclude_id:
        query = query.where(Flight.id != exclude_id)
    return (await db.execute(query)).first() is not None


@router.get("")
async def list_flights(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    status: Optional[str] = Query(None),
    origin: Optional[str] = Query(None),
    destination: Optional[str] = Query(None),
    flight_date: Optional[date] = Query(None, alias="date"),
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List flights with optional filters, ordered by departure time.
    """
    filters = []

    if status:
        try:
            filters.append(Flight.status == FlightStatus(status))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status}")

    if origin:
        filters.append(Flight.origin.ilike(f"%{origin}%"))

    if destination:
        filters.append(Flight.destination.ilike(f"%{destination}%"))

    if flight_date:
        start = datetime.combine(flight_date, datetime.min.time())
        filters.append(Flight.departure_time >= start)
        filters.append(Flight.departure_time < start + timedelta(days=1))

    total = (await db.execute(select(func.count(Flight.id)).where(*filters))).scalar() or 0

    result = await db.execute(
        select(Flight)
        .where(*filters)
        .order_by(Flight.departure_time.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    flights = result.scalars().all()

    return success_response(data={
        "flights": [serialize_flight(f) for f in flights],
        "pagination": pagination(page, limit, total, len(flights)),
    })


@router.get("/stats")
async def get_flight_stats(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Fleet-wide counts: totals, today's departures, status and aircraft mix.
    """
    today = datetime.combine(datetime.utcnow().date(), datetime.min.time())
    tomorrow = today + timedelta(days=1)

    total_flights = (await db.execute(select(func.count(Flight.id)))).scalar() or 0
    today_flights = (await db.execute(
        select(func.count(Flight.id)).where(
            Flight.departure_time >= today,
            Flight.departure_time < tomorrow,
        )
    )).scalar() or 0
    total_passengers = (await db.execute(select(func.sum(Flight.passengers_total)))).scalar() or 0

    status_rows = await db.execute(select(Flight.status, func.count(Flight.id)).group_by(Flight.status))
    aircraft_rows = await db.execute(select(Flight.aircraft, func.count(Flight.id)).group_by(Flight.aircraft))

    return success_response(data={
        "totalFlights": total_flights,
        "todayFlights": today_flights,
        "statusBreakdown": {status.value: count for status, count in status_rows.all()},
        "totalPassengers": int(total_passengers),
        "aircraftTypes": {aircraft.value: count for aircraft, count in aircraft_rows.all()},
    })


@router.get("/{flight_id}")
async def get_flight(
    flight_id: str,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    flight = await _get_flight_or_404(db, flight_id)
    return success_response(data=serialize_flight(flight))


@router.post("", status_code=201)
async def create_flight(
    payload: FlightCreate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a flight. Missing cabin counts are distributed from the total.
    """
    if await _flight_number_taken(db, payload.flight_number):
        raise HTTPException(status_code=400, detail="Flight number already exists")

    flight = Flight(
        id=str(uuid.uuid4()),
        flight_number=payload.flight_number,
        airline=payload.airline,
        aircraft=payload.aircraft,
        origin=payload.origin,
        destination=payload.destination,
        transit_points=payload.transit_points,
        departure_time=payload.departure_time,
        arrival_time=payload.arrival_time,
        platform=payload.platform,
        status=payload.status,
        fuel_status=payload.fuel_status,
        created_by=current.id,
    )
    apply_passengers(flight, payload.passengers)
    apply_delay(flight, payload.delay)

    db.add(flight)
    await db.flush()

    logger.info("Flight created", flight_id=flight.id, flight_number=flight.flight_number)
    return success_response(data=serialize_flight(flight), message="Flight created successfully")


@router.put("/{flight_id}")
async def update_flight(
    flight_id: str,
    payload: FlightUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the allow-listed flight fields present in the body.
    """
    flight = await _get_flight_or_404(db, flight_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True, exclude={"passengers", "delay"})

    number = changes.get("flight_number")
    if number and await _flight_number_taken(db, number, exclude_id=flight.id):
        raise HTTPException(status_code=400, detail="Flight number already exists")

    for field, value in changes.items():
        setattr(flight, field, value)

    if payload.passengers is not None:
        apply_passengers(flight, payload.passengers)
    apply_delay(flight, payload.delay)

    if flight.arrival_time <= flight.departure_time:
        raise HTTPException(status_code=400, detail="Arrival time must be after departure time")

    flight.updated_at = datetime.utcnow()
    await db.flush()

    logger.info("Flight updated", flight_id=flight.id, fields=sorted(changes))
    return success_response(data=serialize_flight(flight), message="Flight updated successfully")


@router.delete("/{flight_id}")
async def delete_flight(
    flight_id: str,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    flight = await _get_flight_or_404(db, flight_id)
    await db.delete(flight)

    logger.info("Flight deleted", flight_id=flight_id)
    return success_response(message="Flight deleted successfully")


@router.patch("/{flight_id}/status")
async def update_flight_status(
    flight_id: str,
    payload: FlightStatusUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    flight = await _get_flight_or_404(db, flight_id)

    previous = flight.status
    flight.status = payload.status
    apply_delay(flight, payload.delay)
    flight.updated_at = datetime.utcnow()
    await db.flush()

    logger.info(
        "Flight status changed",
        flight_id=flight.id,
        previous=previous.value if previous else None,
        status=flight.status.value,
    )
    return success_response(data=serialize_flight(flight), message="Flight status updated successfully")
