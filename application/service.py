from __future__ import annotations
import logging
from typing import Iterable, Optional

from client.contract import BackendClient
from core.errors import NotFound, StaffingError, raise_for_error
from posting.schemas import JobPostingSchema
from user.service import get_profiles
from .models import ApplicationStatus
from .schemas import ApplicantProfile, ApplicantView, ApplicationSchema

logger = logging.getLogger(__name__)


def get_application(client: BackendClient, application_id: int) -> Optional[ApplicationSchema]:
    res = client.table("applications").select("*").eq("id", application_id).execute()
    raise_for_error(res.error, action="load application")
    rows = res.data or []
    return ApplicationSchema.model_validate(rows[0]) if rows else None


def set_application_status(
    client: BackendClient,
    application_id: int,
    status: ApplicationStatus,
    hired_posting_id: Optional[int] = None,
) -> ApplicationSchema:
    values = {"status": status, "hired_posting_id": hired_posting_id}
    res = client.table("applications").update(values).eq("id", application_id).execute()
    raise_for_error(res.error, action=f"mark application {status.value}")
    app = get_application(client, application_id)
    if app is None:
        raise NotFound("Application not found")
    return app


def load_applicants(client: BackendClient, postings: Iterable[JobPostingSchema]) -> list[ApplicantView]:
    """
    Applications for the given postings, newest first, each joined with the
    applicant's contact details and the posting title.

    A failed fetch leaves the organizer with an empty list instead of an error.
    """
    titles = {p.id: p.title for p in postings}
    if not titles:
        return []

    res = (
        client.table("applications")
        .select("*")
        .in_("job_id", list(titles))
        .order("created_at", desc=True)
        .execute()
    )
    if res.error is not None:
        logger.error("Error fetching applications: [%s] %s", res.error.code, res.error.message)
        return []

    rows = res.data or []
    try:
        profiles = get_profiles(client, (r["applicant_id"] for r in rows), "id, full_name, email, phone")
    except StaffingError as exc:
        logger.error("Error fetching applicant profiles: %s", exc.detail)
        profiles = {}

    out = []
    for row in rows:
        profile = profiles.get(row["applicant_id"])
        out.append(ApplicantView(
            **row,
            applicant=ApplicantProfile(**profile) if profile else None,
            job_title=titles.get(row["job_id"]),
        ))
    return out


def applicants_for_posting(applications: Iterable[ApplicationSchema], posting_id: int) -> list:
    return [a for a in applications if a.job_id == posting_id]
