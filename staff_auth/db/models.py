# staff-auth/staff_auth/db/models.py
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Role(str, Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    LEADER = "leader"
    ADMIN = "admin"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


_ROLE_VALUES = ", ".join(f"'{role.value}'" for role in Role)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    available_days_off = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    __table_args__ = (
        CheckConstraint(f"role IN ({_ROLE_VALUES})", name="ck_users_role"),
        CheckConstraint("available_days_off >= 0", name="ck_users_days_off"),
    )
    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan")


class Session(Base):
    __tablename__ = "sessions"
    session_id = Column(String(36), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    __table_args__ = ( CheckConstraint("expires_at > created_at", name="ck_sessions_expiry"), )
    user = relationship("User", back_populates="sessions")
