"""
Weather API Routes
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import asyncio

import aiohttp
import structlog

from airops.api.deps import CurrentUser, get_current_user, get_weather_client
from airops.api.responses import success_response
from airops.config import settings
from airops.schemas import MultipleCitiesRequest
from airops.tools.weather_tools import (
    WeatherClient,
    WeatherServiceError,
    get_city_forecast,
    get_city_weather,
    get_multiple_cities_weather,
)

logger = structlog.get_logger()
router = APIRouter()

WEATHER_ERRORS = (WeatherServiceError, aiohttp.ClientError, asyncio.TimeoutError, KeyError, IndexError)


def raise_weather_error(error: Exception, fallback_message: str) -> None:
    """Map a failed lookup onto the response status; auth and unknown-city errors pass through."""
    if isinstance(error, WeatherServiceError) and error.status_code in (401, 404, 503):
        raise HTTPException(status_code=error.status_code, detail=error.message)
    raise HTTPException(status_code=500, detail=fallback_message)


@router.get("/dhaka")
async def get_dhaka_weather(
    current: CurrentUser = Depends(get_current_user),
    client: WeatherClient = Depends(get_weather_client),
):
    try:
        data = await get_city_weather(settings.weather_default_city, client=client)
    except WEATHER_ERRORS as e:
        logger.error("Dhaka weather lookup failed", error=str(e))
        raise_weather_error(e, "Weather data unavailable for Dhaka")
    return success_response(data=data)


@router.get("/forecast")
@router.get("/forecast/{city}")
async def get_weather_forecast(
    city: Optional[str] = None,
    current: CurrentUser = Depends(get_current_user),
    client: WeatherClient = Depends(get_weather_client),
):
    """
    Next 24 hours in 3-hour steps; defaults to the home base city.
    """
    city = (city or "").strip() or settings.weather_default_city
    try:
        data = await get_city_forecast(city, client=client)
    except WEATHER_ERRORS as e:
        logger.error("Forecast lookup failed", city=city, error=str(e))
        raise_weather_error(e, "Weather forecast unavailable")
    return success_response(data=data)


@router.post("/multiple")
async def get_weather_for_cities(
    payload: MultipleCitiesRequest,
    current: CurrentUser = Depends(get_current_user),
    client: WeatherClient = Depends(get_weather_client),
):
    """
    Current conditions for several cities; per-city failures are reported inline.
    """
    cities = [c.strip() for c in (payload.cities or []) if c and c.strip()]
    if not cities:
        raise HTTPException(status_code=400, detail="Cities array is required")

    results = await get_multiple_cities_weather(cities, client=client)
    return success_response(data=results)


@router.get("/{city}")
async def get_weather_for_city(
    city: str,
    current: CurrentUser = Depends(get_current_user),
    client: WeatherClient = Depends(get_weather_client),
):
    city = city.strip()
    if not city:
        raise HTTPException(status_code=400, detail="City name is required")

    try:
        data = await get_city_weather(city, client=client)
    except WEATHER_ERRORS as e:
        logger.error("City weather lookup failed", city=city, error=str(e))
        raise_weather_error(e, "Weather data unavailable for this city")
    return success_response(data=data)
