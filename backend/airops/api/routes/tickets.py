"""
Ticket (fare sheet) API Routes
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
from datetime import datetime
import uuid
import structlog

from airops.api.deps import CurrentUser, get_current_user
from airops.api.responses import dump, pagination, success_response
from airops.config import settings
from airops.db.database import get_db
from airops.models.flight import Flight, FlightStatus
from airops.models.ticket import Ticket, CABIN_CLASSES
from airops.schemas import (
    TicketCreate,
    TicketFactors,
    TicketPricing,
    TicketPricingUpdate,
    TicketResponse,
    TicketUpdate,
)
from airops.tools.fare_tools import build_sample_ticket

logger = structlog.get_logger()
router = APIRouter()


def serialize_ticket(ticket: Ticket) -> dict:
    return dump(TicketResponse.from_ticket(ticket))


def apply_pricing(ticket: Ticket, pricing: TicketPricing) -> None:
    for cabin in CABIN_CLASSES:
        price = getattr(pricing, cabin)
        setattr(ticket, f"{cabin}_base", price.base)
        setattr(ticket, f"{cabin}_current", price.current)
        setattr(ticket, f"{cabin}_currency", price.currency)


def apply_factors(ticket: Ticket, factors: TicketFactors) -> None:
    ticket.distance = factors.distance
    ticket.demand = factors.demand
    ticket.season = factors.season
    ticket.fuel_cost = factors.fuel_cost


async def _get_ticket_or_404(db: AsyncSession, ticket_id: str) -> Ticket:
    result = await db.execute(select(Ticket).where(Ticket.id == ticket_id))
    ticket = result.scalar_one_or_none()
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.get("")
async def list_tickets(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    route: Optional[str] = Query(None),
    aircraft: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List fare sheets, most recently updated first.

    ``route`` matches either end of the route.
    """
    filters = []
    if route:
        filters.append(or_(Ticket.origin.ilike(f"%{route}%"), Ticket.destination.ilike(f"%{route}%")))
    if aircraft:
        filters.append(Ticket.aircraft.ilike(f"%{aircraft}%"))
    if is_active is not None:
        filters.append(Ticket.is_active == is_active)

    total = (await db.execute(select(func.count(Ticket.id)).where(*filters))).scalar() or 0
    result = await db.execute(
        select(Ticket)
        .where(*filters)
        .order_by(Ticket.last_updated.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    tickets = result.scalars().all()

    return success_response(data={
        "tickets": [serialize_ticket(t) for t in tickets],
        "pagination": pagination(page, limit, total, len(tickets)),
    })


@router.get("/stats")
async def get_ticket_stats(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    total = (await db.execute(select(func.count(Ticket.id)))).scalar() or 0
    active = (await db.execute(
        select(func.count(Ticket.id)).where(Ticket.is_active == True)  # noqa: E712
    )).scalar() or 0

    route_rows = await db.execute(
        select(
            Ticket.origin,
            Ticket.destination,
            func.count(Ticket.id),
            func.avg(Ticket.economy_current),
            func.avg(Ticket.business_current),
            func.avg(Ticket.first_class_current),
        ).group_by(Ticket.origin, Ticket.destination)
    )
    aircraft_rows = await db.execute(select(Ticket.aircraft, func.count(Ticket.id)).group_by(Ticket.aircraft))
    demand_rows = await db.execute(select(Ticket.demand, func.count(Ticket.id)).group_by(Ticket.demand))

    return success_response(data={
        "totalTickets": total,
        "activeTickets": active,
        "routeBreakdown": [
            {
                "origin": origin,
                "destination": destination,
                "count": count,
                "avgEconomyPrice": round(economy or 0, 2),
                "avgBusinessPrice": round(business or 0, 2),
                "avgFirstClassPrice": round(first_class or 0, 2),
            }
            for origin, destination, count, economy, business, first_class in route_rows.all()
        ],
        "aircraftBreakdown": {aircraft: count for aircraft, count in aircraft_rows.all()},
        "demandAnalysis": {
            getattr(demand, "value", demand): count for demand, count in demand_rows.all()
        },
    })


@router.post("/generate-sample")
async def generate_sample_tickets(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a fare sheet for every non-cancelled flight that has none yet.
    """
    try:
        flights = (await db.execute(
            select(Flight).where(Flight.status != FlightStatus.CANCELLED)
        )).scalars().all()
        priced = set((await db.execute(select(Ticket.flight_number))).scalars().all())

        created = []
        for flight in flights:
            if flight.flight_number in priced:
                continue
            ticket = build_sample_ticket(flight, currency=settings.currency)
            ticket.updated_by = current.id
            db.add(ticket)
            created.append(ticket)
            priced.add(flight.flight_number)

        await db.flush()
    except SQLAlchemyError as e:
        logger.error("Sample ticket generation failed", error=str(e))
        raise HTTPException(status_code=500, detail="Error generating sample tickets")

    logger.info("Sample tickets generated", count=len(created))
    return success_response(
        data=[serialize_ticket(t) for t in created],
        message=f"Generated {len(created)} sample tickets",
    )


@router.get("/flight/{flight_number}")
async def get_ticket_by_flight(
    flight_number: str,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Ticket)
        .where(Ticket.flight_number == flight_number.upper(), Ticket.is_active == True)  # noqa: E712
        .order_by(Ticket.last_updated.desc())
    )
    ticket = result.scalars().first()
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found for this flight")
    return success_response(data=serialize_ticket(ticket))


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: str,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ticket = await _get_ticket_or_404(db, ticket_id)
    return success_response(data=serialize_ticket(ticket))


@router.post("", status_code=201)
async def create_ticket(
    payload: TicketCreate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a fare sheet for an existing flight.

    Route and aircraft default to the flight's; validity defaults to 30 days.
    """
    result = await db.execute(select(Flight).where(Flight.flight_number == payload.flight_number))
    flight = result.scalar_one_or_none()
    if not flight:
        raise HTTPException(status_code=400, detail="Flight not found")

    now = datetime.utcnow()
    ticket = Ticket(
        id=str(uuid.uuid4()),
        flight_number=payload.flight_number,
        origin=payload.route.origin if payload.route else flight.origin,
        destination=payload.route.destination if payload.route else flight.destination,
        aircraft=payload.aircraft or flight.aircraft.value,
        valid_from=payload.valid_from or now,
        valid_until=payload.resolved_valid_until(now),
        is_active=payload.is_active,
        last_updated=now,
        updated_by=current.id,
    )
    apply_pricing(ticket, payload.pricing)
    apply_factors(ticket, payload.factors)

    db.add(ticket)
    await db.flush()

    logger.info("Ticket created", ticket_id=ticket.id, flight_number=ticket.flight_number)
    return success_response(data=serialize_ticket(ticket), message="Ticket created successfully")


@router.put("/{ticket_id}")
async def update_ticket(
    ticket_id: str,
    payload: TicketUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the allow-listed fare sheet fields present in the body.
    """
    ticket = await _get_ticket_or_404(db, ticket_id)

    if payload.route is not None:
        ticket.origin = payload.route.origin
        ticket.destination = payload.route.destination
    if payload.aircraft is not None:
        ticket.aircraft = payload.aircraft
    if payload.pricing is not None:
        apply_pricing(ticket, payload.pricing)
    if payload.factors is not None:
        apply_factors(ticket, payload.factors)
    if payload.valid_from is not None:
        ticket.valid_from = payload.valid_from
    if payload.valid_until is not None:
        ticket.valid_until = payload.valid_until
    if payload.is_active is not None:
        ticket.is_active = payload.is_active

    ticket.updated_by = current.id
    ticket.last_updated = datetime.utcnow()
    await db.flush()

    logger.info("Ticket updated", ticket_id=ticket.id)
    return success_response(data=serialize_ticket(ticket), message="Ticket updated successfully")


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ticket = await _get_ticket_or_404(db, ticket_id)
    await db.delete(ticket)

    logger.info("Ticket deleted", ticket_id=ticket_id)
    return success_response(message="Ticket deleted successfully")


@router.patch("/{ticket_id}/pricing")
async def update_ticket_pricing(
    ticket_id: str,
    payload: TicketPricingUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ticket = await _get_ticket_or_404(db, ticket_id)

    apply_pricing(ticket, payload.pricing)
    if payload.factors is not None:
        apply_factors(ticket, payload.factors)
    ticket.updated_by = current.id
    ticket.last_updated = datetime.utcnow()
    await db.flush()

    logger.info(
        "Ticket pricing updated",
        ticket_id=ticket.id,
        economy=ticket.economy_current,
        change=ticket.get_price_change("economy"),
    )
    return success_response(data=serialize_ticket(ticket), message="Ticket pricing updated successfully")
