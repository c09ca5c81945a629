"""
Shared API dependencies.
"""
from typing import Any, Dict, Optional
import random

import jwt
import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from airops.db.database import get_db
from airops.models.user import User
from airops.security import decode_access_token
from airops.tools.weather_tools import WeatherClient

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


def get_rng() -> random.Random:
    """Random source for the simulated analysis signals."""
    return random.Random()


def get_weather_client() -> WeatherClient:
    return WeatherClient()


class CurrentUser:
    """Authenticated caller: the stored user plus the decoded token claims."""

    def __init__(self, user: User, claims: Dict[str, Any]):
        self.user = user
        self.claims = claims

    @property
    def id(self) -> str:
        return self.user.id

    @property
    def session_id(self) -> Optional[str]:
        return self.claims.get("sid")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")

    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Access denied. Token expired.")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Access denied. Invalid token.")

    result = await db.execute(select(User).where(User.id == claims.get("userId")))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        logger.warning("Token rejected for unknown or inactive user", user_id=claims.get("userId"))
        raise HTTPException(status_code=401, detail="Access denied. User not found or inactive.")

    return CurrentUser(user, claims)
