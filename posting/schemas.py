from datetime import date, datetime, time
from typing import Optional, Union
from pydantic import BaseModel, Field, ConfigDict

from .models import PostingStatus


class JobPostingSchema(BaseModel):
    id: int
    organizer_id: str
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: str
    positions_needed: int
    hourly_rate: int
    role: str
    status: PostingStatus
    hired: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# PUBLIC payload from the post-a-job form; numbers may arrive as typed text ("$25/hr")
class JobPostingCreatePayload(BaseModel):
    title: str = ""
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: str = ""
    positions_needed: Optional[Union[int, str]] = None
    hourly_rate: Optional[Union[int, str]] = None
    role: str = ""

    model_config = ConfigDict(extra="forbid")


class JobPostingUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: Optional[str] = None
    positions_needed: Optional[int] = Field(None, ge=1)
    hourly_rate: Optional[Union[int, str]] = None
    role: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class DashboardStats(BaseModel):
    active_postings: int = 0
    total_applicants: int = 0
    hired: int = 0
