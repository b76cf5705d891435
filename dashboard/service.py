from __future__ import annotations
import logging

from application.service import load_applicants
from application.workflow import WorkflowState
from browse import service as browse
from client.contract import BackendClient
from core.errors import BackendUnavailable
from posting.service import compute_stats, list_postings
from user.models import UserRole
from user.schemas import UserProfileSchema
from .schema import DashboardView, OrganizerDashboard, StaffDashboard

logger = logging.getLogger(__name__)


def load_organizer_dashboard(
    client: BackendClient,
    profile: UserProfileSchema,
    state: WorkflowState,
) -> OrganizerDashboard:
    try:
        postings = list_postings(client, profile.id)
    except BackendUnavailable:
        logger.error("Database tables not set up; organizer dashboard left empty")
        return OrganizerDashboard(setup_required=True)

    applicants = load_applicants(client, postings)
    return OrganizerDashboard(
        postings=postings,
        applicants=state.visible(applicants),
        stats=compute_stats(postings, applicants),
    )


def load_staff_dashboard(client: BackendClient, profile: UserProfileSchema, query: str = "") -> StaffDashboard:
    try:
        jobs = browse.list_open_jobs(client)
        applications = browse.my_applications(client, profile.id)
    except BackendUnavailable:
        logger.error("Database tables not set up; staff dashboard left empty")
        return StaffDashboard(user_location=profile.location, setup_required=True)

    return StaffDashboard(
        jobs=browse.listings(browse.search(jobs, query), applications, profile.location),
        applications=applications,
        user_location=profile.location,
    )


def load_dashboard(
    client: BackendClient,
    profile: UserProfileSchema,
    state: WorkflowState,
    query: str = "",
) -> DashboardView:
    if profile.role == UserRole.organizer:
        return load_organizer_dashboard(client, profile, state)
    return load_staff_dashboard(client, profile, query)
