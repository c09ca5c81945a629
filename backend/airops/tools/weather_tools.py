"""
Weather Tools

OpenWeatherMap lookups for the weather endpoints and the normalized
WeatherSnapshot adapter used by route safety scoring.
"""
from typing import Dict, Any, List, Optional
from datetime import datetime
import asyncio

import aiohttp
import structlog

from airops.analysis.types import FALLBACK_WEATHER, RouteWeather, WeatherSnapshot
from airops.config import settings

logger = structlog.get_logger()

MS_TO_KMH = 3.6
FORECAST_ENTRIES = 8


class WeatherServiceError(Exception):
    """Upstream weather lookup failed; ``status_code`` mirrors the upstream status."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class WeatherClient:
    """Thin aiohttp wrapper around the OpenWeatherMap REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.api_key = (api_key if api_key is not None else settings.weather_api_key).strip()
        self.base_url = (base_url or settings.weather_api_base_url).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(
            total=timeout_seconds or settings.weather_timeout_seconds
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(timeout=self.timeout)

    async def _get_json(
        self,
        session: aiohttp.ClientSession,
        endpoint: str,
        city: str,
    ) -> Dict[str, Any]:
        if not self.is_configured:
            raise WeatherServiceError("Weather API key not configured", status_code=503)

        params = {"q": city, "appid": self.api_key, "units": "metric"}
        async with session.get(f"{self.base_url}/{endpoint}", params=params) as response:
            if response.status == 401:
                raise WeatherServiceError("Invalid weather API key", status_code=401)
            if response.status == 404:
                raise WeatherServiceError("City not found", status_code=404)
            if response.status != 200:
                raise WeatherServiceError(
                    f"Weather API returned {response.status}",
                    status_code=502,
                )
            return await response.json()

    async def current(self, session: aiohttp.ClientSession, city: str) -> Dict[str, Any]:
        return await self._get_json(session, "weather", city)

    async def forecast(self, session: aiohttp.ClientSession, city: str) -> Dict[str, Any]:
        return await self._get_json(session, "forecast", city)


# ==================== Payload parsing ====================

def _visibility_km(payload: Dict[str, Any]) -> Optional[float]:
    visibility = payload.get("visibility")
    if visibility is None:
        return None
    return round(visibility / 1000, 1)


def _wind_kmh(wind: Dict[str, Any]) -> int:
    return round(float(wind.get("speed", 0.0)) * MS_TO_KMH)


def parse_current_conditions(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a /weather payload for the weather endpoints."""
    condition = payload["weather"][0]
    return {
        "location": {
            "city": payload.get("name"),
            "country": payload.get("sys", {}).get("country"),
            "coordinates": {
                "lat": payload.get("coord", {}).get("lat"),
                "lon": payload.get("coord", {}).get("lon"),
            },
        },
        "current": {
            "temperature": round(payload["main"]["temp"]),
            "feelsLike": round(payload["main"].get("feels_like", payload["main"]["temp"])),
            "humidity": payload["main"].get("humidity"),
            "pressure": payload["main"].get("pressure"),
            "visibility": _visibility_km(payload),
            "windSpeed": _wind_kmh(payload.get("wind", {})),
            "windDirection": payload.get("wind", {}).get("deg"),
            "condition": condition.get("main"),
            "description": condition.get("description"),
            "icon": condition.get("icon"),
        },
        "timestamp": datetime.utcnow().isoformat(),
        "source": "OpenWeatherMap",
    }


def parse_forecast(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a /forecast payload: location plus the next 24h in 3h steps."""
    city = payload["city"]
    return {
        "location": {
            "city": city.get("name"),
            "country": city.get("country"),
            "coordinates": {
                "lat": city.get("coord", {}).get("lat"),
                "lon": city.get("coord", {}).get("lon"),
            },
        },
        "forecast": [
            {
                "datetime": item.get("dt_txt"),
                "temperature": round(item["main"]["temp"]),
                "condition": item["weather"][0].get("main"),
                "description": item["weather"][0].get("description"),
                "humidity": item["main"].get("humidity"),
                "windSpeed": _wind_kmh(item.get("wind", {})),
                "icon": item["weather"][0].get("icon"),
            }
            for item in payload.get("list", [])[:FORECAST_ENTRIES]
        ],
        "timestamp": datetime.utcnow().isoformat(),
        "source": "OpenWeatherMap",
    }


def to_snapshot(payload: Dict[str, Any]) -> WeatherSnapshot:
    """Normalize a /weather payload into the scoring input.

    Wind stays in the upstream metric m/s; the scoring thresholds are m/s.
    """
    visibility = _visibility_km(payload)
    return WeatherSnapshot(
        condition=payload["weather"][0]["main"],
        visibility_km=visibility if visibility is not None else FALLBACK_WEATHER.visibility_km,
        wind_speed_ms=float(payload.get("wind", {}).get("speed", 0.0)),
        temperature_c=float(payload["main"]["temp"]),
    )


# ==================== Endpoint lookups ====================

async def get_city_weather(city: str, client: Optional[WeatherClient] = None) -> Dict[str, Any]:
    client = client or WeatherClient()
    async with client.session() as session:
        payload = await client.current(session, city)
    return parse_current_conditions(payload)


async def get_city_forecast(city: str, client: Optional[WeatherClient] = None) -> Dict[str, Any]:
    client = client or WeatherClient()
    async with client.session() as session:
        payload = await client.forecast(session, city)
    return parse_forecast(payload)


async def get_multiple_cities_weather(
    cities: List[str],
    client: Optional[WeatherClient] = None,
) -> List[Dict[str, Any]]:
    """Fetch several cities concurrently; each entry reports its own success."""
    client = client or WeatherClient()

    async def _one(session: aiohttp.ClientSession, city: str) -> Dict[str, Any]:
        try:
            parsed = parse_current_conditions(await client.current(session, city))
        except (WeatherServiceError, aiohttp.ClientError, asyncio.TimeoutError, KeyError, IndexError) as e:
            logger.warning("City weather lookup failed", city=city, error=str(e))
            return {"city": city, "success": False, "error": "Weather data unavailable"}
        current = parsed["current"]
        return {
            "city": parsed["location"]["city"],
            "country": parsed["location"]["country"],
            "temperature": current["temperature"],
            "condition": current["condition"],
            "description": current["description"],
            "windSpeed": current["windSpeed"],
            "visibility": current["visibility"],
            "success": True,
        }

    async with client.session() as session:
        return list(await asyncio.gather(*(_one(session, city) for city in cities)))


# ==================== Scoring adapter ====================

async def get_weather_snapshot(
    session: aiohttp.ClientSession,
    city: str,
    client: WeatherClient,
) -> WeatherSnapshot:
    """Current conditions for one city; the fallback snapshot on any failure."""
    if not client.is_configured:
        logger.warning("Weather API key not configured, using fallback", city=city)
        return FALLBACK_WEATHER
    try:
        return to_snapshot(await client.current(session, city))
    except (WeatherServiceError, aiohttp.ClientError, asyncio.TimeoutError,
            KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning("Weather lookup failed, using fallback", city=city, error=str(e))
        return FALLBACK_WEATHER


async def get_route_weather(
    origin: str,
    destination: str,
    client: Optional[WeatherClient] = None,
) -> RouteWeather:
    """Fetch origin and destination conditions concurrently."""
    client = client or WeatherClient()
    async with client.session() as session:
        origin_weather, destination_weather = await asyncio.gather(
            get_weather_snapshot(session, origin, client),
            get_weather_snapshot(session, destination, client),
        )
    return RouteWeather(origin=origin_weather, destination=destination_weather)
