"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Timestamps are stored as ISO-8601 UTC strings with fixed-width
microseconds so that text ordering matches chronological ordering.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class ApplicationStatus(str, Enum):
    """Pipeline stages an application moves through, in board order."""
    applied = "applied"
    oa = "oa"
    interview = "interview"
    offer = "offer"
    rejected = "rejected"


STATUSES = tuple(s.value for s in ApplicationStatus)

# SQLite INTEGER primary keys are signed 64-bit
MAX_ID = 2 ** 63 - 1


def is_storable_id(value: int) -> bool:
    return 0 <= value <= MAX_ID


def utc_now_iso() -> str:
    """Return the current UTC time as e.g. `2026-10-19T08:20:00.123456Z`."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `email`: unique login, stored trimmed and lowercased
    - `password_hash`: hashed password string (never store plaintext)
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, nullable=False, unique=True)
    password_hash: str
    created_at: str = Field(default_factory=utc_now_iso)


class Application(SQLModel, table=True):
    """An internship application owned by exactly one user."""
    __tablename__ = "applications"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    company: str
    role: str
    status: str = Field(default=ApplicationStatus.applied.value, index=True)
    location: str = ""
    referral: bool = False
    source: str = ""
    notes: str = ""
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso, index=True)
