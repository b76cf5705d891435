from __future__ import annotations
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, String, JSON
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthIdentity(Base):
    """Login identity owned by the auth side of the backend (not a profile)."""
    __tablename__ = "auth_identities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    user_metadata: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
