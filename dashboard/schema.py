from typing import Optional, Union
from typing_extensions import Literal
from pydantic import BaseModel

from application.schemas import ApplicantView, MyApplicationView
from browse.schema import JobListing
from posting.schemas import DashboardStats, JobPostingSchema


class OrganizerDashboard(BaseModel):
    view: Literal["organizer"] = "organizer"
    postings: list[JobPostingSchema] = []
    applicants: list[ApplicantView] = []
    stats: DashboardStats = DashboardStats()
    setup_required: bool = False


class StaffDashboard(BaseModel):
    view: Literal["staff"] = "staff"
    jobs: list[JobListing] = []
    applications: list[MyApplicationView] = []
    user_location: Optional[str] = None
    setup_required: bool = False


DashboardView = Union[OrganizerDashboard, StaffDashboard]
