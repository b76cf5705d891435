from typing import Optional
from pydantic import BaseModel

from application.models import ApplicationStatus
from posting.schemas import JobPostingSchema
from user.schemas import ProfileSummary


class OpenJobView(JobPostingSchema):
    organizer: ProfileSummary = ProfileSummary()


class JobListing(OpenJobView):
    nearby: bool = False
    application_status: Optional[ApplicationStatus] = None
