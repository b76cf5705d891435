from __future__ import annotations
from datetime import date, datetime, time
from enum import Enum

from sqlalchemy import Date, DateTime, Integer, String, Text, Time, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base
from client.models import _utcnow


class PostingStatus(str, Enum):
    active = "active"
    filled = "filled"


class JobPosting(Base):
    __tablename__ = "job_postings"

    id: Mapped[int] = mapped_column(primary_key=True)

    organizer_id: Mapped[str] = mapped_column(
        ForeignKey("user_profiles.id", ondelete="CASCADE"), index=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)

    location: Mapped[str] = mapped_column(String(255), nullable=False)
    positions_needed: Mapped[int] = mapped_column(Integer, nullable=False)
    # integer minor currency units; parse_hourly_rate keeps the typed digits as-is
    hourly_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[str] = mapped_column(String(128), nullable=False)

    status: Mapped[PostingStatus] = mapped_column(
        SAEnum(PostingStatus, name="posting_status"), nullable=False, default=PostingStatus.active
    )
    hired: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

Index("ix_job_postings_status_created", JobPosting.status, JobPosting.created_at)
