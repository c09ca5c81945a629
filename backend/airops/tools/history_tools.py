"""
Route History Tools

Punctuality statistics for a city pair over a trailing window of stored
flights.
"""
from typing import Optional
from datetime import datetime, timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from airops.analysis.types import BASELINE_ROUTE_HISTORY, RouteHistory
from airops.config import settings
from airops.models.flight import Flight, FlightStatus

logger = structlog.get_logger()


async def get_route_history(
    db: AsyncSession,
    origin: str,
    destination: str,
    window_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> RouteHistory:
    """
    Aggregate on-time, delay and cancellation rates for a route.

    Args:
        db: Database session
        origin: Origin city; matched case-insensitively as a substring
        destination: Destination city; matched the same way
        window_days: Trailing window size (defaults to ROUTE_HISTORY_WINDOW_DAYS)
        now: Reference time for the window

    Returns:
        RouteHistory; the fixed baseline when no flights match or the
        query fails
    """
    window_days = window_days or settings.route_history_window_days
    since = (now or datetime.utcnow()) - timedelta(days=window_days)

    try:
        result = await db.execute(
            select(Flight).where(
                Flight.origin.ilike(f"%{origin}%"),
                Flight.destination.ilike(f"%{destination}%"),
                Flight.departure_time >= since,
            )
        )
        flights = result.scalars().all()
    except SQLAlchemyError as e:
        logger.warning("Route history query failed, using baseline",
                       origin=origin, destination=destination, error=str(e))
        return BASELINE_ROUTE_HISTORY

    total = len(flights)
    if total == 0:
        return BASELINE_ROUTE_HISTORY

    on_time = sum(1 for f in flights if f.status == FlightStatus.ON_TIME)
    delayed = sum(1 for f in flights if f.status == FlightStatus.DELAYED)
    cancelled = sum(1 for f in flights if f.status == FlightStatus.CANCELLED)
    total_delay = sum(f.delay_minutes for f in flights if f.delay_minutes)

    return RouteHistory(
        total_flights=total,
        on_time_rate=round(on_time / total * 100, 2),
        delay_rate=round(delayed / total * 100, 2),
        cancellation_rate=round(cancelled / total * 100, 2),
        average_delay=round(total_delay / max(delayed, 1), 1),
    )
