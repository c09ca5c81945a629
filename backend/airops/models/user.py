"""
User Database Model
"""
from sqlalchemy import Column, String, Date, DateTime, Boolean, Enum as SQLEnum
from datetime import datetime
import enum

from airops.db.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class User(Base):
    """Back-office administrator account."""

    __tablename__ = "users"

    id = Column(String(50), primary_key=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(200), nullable=False, unique=True, index=True)
    date_of_birth = Column(Date, nullable=False)
    password_hash = Column(String(100), nullable=False)
    role = Column(SQLEnum(UserRole), default=UserRole.ADMIN)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
