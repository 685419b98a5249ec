"""User model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from docshare.database import Base

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLE_ADMIN = "admin"
ROLES = (ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # stored as submitted
    full_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_STUDENT)  # student/teacher/admin
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
