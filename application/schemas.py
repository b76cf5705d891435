from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from posting.schemas import JobPostingSchema
from .models import ApplicationStatus


class ApplicationSchema(BaseModel):
    id: int
    job_id: int
    applicant_id: str
    cover_letter: str
    availability: str
    status: ApplicationStatus
    hired_posting_id: Optional[int] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ApplicantProfile(BaseModel):
    id: str
    full_name: str
    email: str
    phone: str


# Organizer-side row: application + who applied + for what
class ApplicantView(ApplicationSchema):
    applicant: Optional[ApplicantProfile] = None
    job_title: Optional[str] = None


class JobSummary(BaseModel):
    id: int
    title: str
    location: str
    start_date: date
    hourly_rate: int


# Staff-side row: my application + the job it is for
class MyApplicationView(ApplicationSchema):
    job: Optional[JobSummary] = None


class ApplicationPayload(BaseModel):
    cover_letter: str = ""
    availability: str = ""
    model_config = ConfigDict(extra="forbid")


class AcceptPayload(BaseModel):
    posting_id: Optional[int] = None
    model_config = ConfigDict(extra="forbid")


class AssignPayload(BaseModel):
    posting_id: int
    model_config = ConfigDict(extra="forbid")


class HireResult(BaseModel):
    application: ApplicationSchema
    posting: JobPostingSchema
    previous_posting: Optional[JobPostingSchema] = None


class RejectResult(BaseModel):
    application: ApplicationSchema
    released_posting: Optional[JobPostingSchema] = None
