"""
Password hashing and access tokens.
"""
from datetime import datetime, timedelta
from typing import Dict, Any, Optional

import bcrypt
import jwt

from airops.config import settings


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    session_id: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign an HS256 token; ``sid`` is the login activity that opened the session."""
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))
    payload = {
        "userId": user_id,
        "email": email,
        "role": role,
        "sid": session_id,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError."""
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
