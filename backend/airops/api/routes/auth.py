"""
Authentication API Routes

Registration, login with lockout, logout, login activity and profile
management for back-office administrators.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import datetime, timedelta
from typing import Optional
import uuid
import structlog

from airops.api.deps import CurrentUser, get_current_user
from airops.api.responses import dump, pagination, success_response
from airops.config import settings
from airops.db.database import get_db
from airops.models.login_activity import LoginActivity, LoginFailureReason
from airops.models.user import User, UserRole
from airops.schemas import (
    ChangePasswordRequest,
    LoginActivityResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from airops.security import create_access_token, hash_password, verify_password

logger = structlog.get_logger()
router = APIRouter()

USER_AGENT_MAX_LENGTH = 500


async def count_recent_failures(db: AsyncSession, email: str, now: Optional[datetime] = None) -> int:
    since = (now or datetime.utcnow()) - timedelta(hours=settings.login_lockout_window_hours)
    result = await db.execute(
        select(func.count(LoginActivity.id)).where(
            LoginActivity.email == email,
            LoginActivity.success == False,  # noqa: E712
            LoginActivity.login_time >= since,
        )
    )
    return result.scalar() or 0


async def _get_user_or_404(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _require_self_or_super_admin(current: CurrentUser, user_id: str) -> None:
    if current.id != user_id and current.user.role != UserRole.SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Access denied. You can only modify your own account.")


async def _email_taken(db: AsyncSession, email: str, exclude_id: Optional[str] = None) -> bool:
    query = select(User.id).where(User.email == email)
    if exclude_id:
        query = query.where(User.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


@router.post("/register", status_code=201)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new admin account.
    """
    if await _email_taken(db, payload.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = User(
        id=str(uuid.uuid4()),
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        date_of_birth=payload.date_of_birth,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    await db.flush()

    logger.info("Admin account registered", user_id=user.id, email=user.email)

    return success_response(
        data={"id": user.id, "email": user.email, "fullName": user.full_name},
        message="Admin account created successfully",
    )


@router.post("/login")
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate and issue a bearer token.

    Every attempt is recorded as a LoginActivity; the successful row's id
    becomes the token's session id.
    """
    if await count_recent_failures(db, payload.email) >= settings.login_max_failed_attempts:
        logger.warning("Login locked out", email=payload.email)
        raise HTTPException(
            status_code=429,
            detail="Too many failed login attempts. Please try again later.",
        )

    ip_address = request.client.host if request.client else None
    user_agent = (request.headers.get("user-agent") or "")[:USER_AGENT_MAX_LENGTH] or None

    result = await db.execute(select(User).where(User.email == payload.email))
    user = result.scalar_one_or_none()

    failure = None
    if not user:
        failure = LoginFailureReason.INVALID_EMAIL
    elif not user.is_active:
        failure = LoginFailureReason.ACCOUNT_DISABLED
    elif not verify_password(payload.password, user.password_hash):
        failure = LoginFailureReason.INVALID_PASSWORD

    activity = LoginActivity(
        id=str(uuid.uuid4()),
        user_id=user.id if user else None,
        email=payload.email,
        login_time=datetime.utcnow(),
        ip_address=ip_address,
        user_agent=user_agent,
        success=failure is None,
        failure_reason=failure,
    )
    db.add(activity)

    if failure is not None:
        # The failed attempt must survive the error response
        await db.commit()
        logger.info("Login failed", email=payload.email, reason=failure.value)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user.last_login = activity.login_time
    await db.flush()

    token = create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
        session_id=activity.id,
    )

    logger.info("Login successful", user_id=user.id, session_id=activity.id)

    return success_response(
        data={
            "token": token,
            "user": {
                "id": user.id,
                "firstName": user.first_name,
                "lastName": user.last_name,
                "email": user.email,
                "role": user.role.value,
                "fullName": user.full_name,
            },
        },
        message="Login successful",
    )


@router.post("/logout")
async def logout(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Close the session opened by the presented token.
    """
    if current.session_id:
        result = await db.execute(
            select(LoginActivity).where(LoginActivity.id == current.session_id)
        )
        activity = result.scalar_one_or_none()
        if activity and activity.logout_time is None:
            activity.logout_time = datetime.utcnow()

    logger.info("Logout", user_id=current.id, session_id=current.session_id)
    return success_response(message="Logout successful")


@router.get("/activity")
async def list_login_activity(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Login attempts, newest first, with the matching user's name when known.
    """
    total = (await db.execute(select(func.count(LoginActivity.id)))).scalar() or 0

    result = await db.execute(
        select(LoginActivity, User)
        .outerjoin(User, LoginActivity.user_id == User.id)
        .order_by(LoginActivity.login_time.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )

    activities = []
    for activity, user in result.all():
        item = dump(LoginActivityResponse.model_validate(activity))
        item["user"] = (
            {"firstName": user.first_name, "lastName": user.last_name, "email": user.email}
            if user else None
        )
        activities.append(item)

    return success_response(data={
        "activities": activities,
        "pagination": pagination(page, limit, total, len(activities)),
    })


@router.get("/profile/{user_id}")
async def get_profile(
    user_id: str,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await _get_user_or_404(db, user_id)
    return success_response(data=dump(UserResponse.model_validate(user)))


@router.put("/profile/{user_id}")
async def update_profile(
    user_id: str,
    payload: ProfileUpdateRequest,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update name, email and date of birth; other fields are not editable here.
    Admins edit their own record; super admins may edit any.
    """
    _require_self_or_super_admin(current, user_id)
    user = await _get_user_or_404(db, user_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and await _email_taken(db, changes["email"], exclude_id=user.id):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = datetime.utcnow()
    await db.flush()

    logger.info("Profile updated", user_id=user.id, fields=sorted(changes))
    return success_response(
        data=dump(UserResponse.model_validate(user)),
        message="Profile updated successfully",
    )


@router.put("/change-password/{user_id}")
async def change_password(
    user_id: str,
    payload: ChangePasswordRequest,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    _require_self_or_super_admin(current, user_id)
    user = await _get_user_or_404(db, user_id)

    if not verify_password(payload.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password_hash = hash_password(payload.new_password)
    user.updated_at = datetime.utcnow()

    logger.info("Password changed", user_id=user.id)
    return success_response(message="Password changed successfully")
