"""
Login Activity Database Model
"""
from sqlalchemy import Column, String, DateTime, Boolean, Enum as SQLEnum, ForeignKey, Index
from datetime import datetime
import enum

from airops.db.database import Base


class LoginFailureReason(str, enum.Enum):
    INVALID_EMAIL = "Invalid Email"
    INVALID_PASSWORD = "Invalid Password"
    ACCOUNT_DISABLED = "Account Disabled"
    OTHER = "Other"


class LoginActivity(Base):
    """One row per login attempt; successful rows double as the session record."""

    __tablename__ = "login_activities"

    id = Column(String(50), primary_key=True)
    user_id = Column(String(50), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    email = Column(String(200), nullable=False)
    login_time = Column(DateTime, default=datetime.utcnow, index=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    success = Column(Boolean, nullable=False, default=False, index=True)
    failure_reason = Column(SQLEnum(LoginFailureReason), nullable=True)
    logout_time = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_login_activities_email_time", "email", "login_time"),
    )

    def __repr__(self):
        return f"<LoginActivity {self.email} success={self.success} at={self.login_time}>"
