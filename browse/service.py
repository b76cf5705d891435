# browse/service.py
from __future__ import annotations
import logging
from contextlib import nullcontext
from typing import Iterable, Optional

from application.models import ApplicationStatus
from application.schemas import ApplicationSchema, JobSummary, MyApplicationView
from client.contract import BackendClient
from core.errors import AlreadyApplied, MissingFields, StaffingError, raise_for_error
from core.latch import ActionLatch
from posting.models import PostingStatus
from user.schemas import ProfileSummary
from user.service import get_profiles
from .schema import JobListing, OpenJobView

logger = logging.getLogger(__name__)


def list_open_jobs(client: BackendClient) -> list[OpenJobView]:
    res = (
        client.table("job_postings")
        .select("*")
        .eq("status", PostingStatus.active)
        .order("created_at", desc=True)
        .execute()
    )
    raise_for_error(res.error, action="load jobs")
    rows = res.data or []

    try:
        organizers = get_profiles(client, (r["organizer_id"] for r in rows), "id, full_name, company")
    except StaffingError as exc:
        logger.warning("organizer profiles unavailable: %s", exc.detail)
        organizers = {}

    jobs = []
    for row in rows:
        org = organizers.get(row["organizer_id"])
        summary = ProfileSummary(full_name=org["full_name"], company=org.get("company")) if org else ProfileSummary()
        jobs.append(OpenJobView(**row, organizer=summary))
    return jobs


def search(jobs: Iterable, query: str) -> list:
    """Case-insensitive substring match on title, location, role and description."""
    jobs = list(jobs)
    q = (query or "").strip().lower()
    if not q:
        return jobs

    def _matches(job) -> bool:
        fields = [job.title, job.location, job.role]
        if job.description:
            fields.append(job.description)
        return any(q in (f or "").lower() for f in fields)

    return [j for j in jobs if _matches(j)]


def is_nearby(job_location: Optional[str], user_location: Optional[str]) -> bool:
    # plain substring either way round; not a distance check
    if not job_location or not user_location:
        return False
    job, user = job_location.lower(), user_location.lower()
    return user in job or job in user


def application_for_job(applications: Iterable[ApplicationSchema], job_id: int) -> Optional[ApplicationSchema]:
    return next((a for a in applications if a.job_id == job_id), None)


def apply(
    client: BackendClient,
    applicant_id: str,
    job,
    cover_letter: str,
    availability: str,
    known_applications: Iterable[ApplicationSchema],
    latch: Optional[ActionLatch] = None,
) -> ApplicationSchema:
    if application_for_job(known_applications, job.id) is not None:
        raise AlreadyApplied()
    if not (cover_letter or "").strip() or not (availability or "").strip():
        raise MissingFields()

    with latch.hold("apply") if latch else nullcontext():
        res = client.table("applications").insert({
            "job_id": job.id,
            "applicant_id": applicant_id,
            "cover_letter": cover_letter,
            "availability": availability,
            "status": ApplicationStatus.pending,
        }).single().execute()
        raise_for_error(res.error, action="submit application", conflict=AlreadyApplied)

    logger.info("staff %s applied to job %s", applicant_id, job.id)
    return ApplicationSchema.model_validate(res.data)


def my_applications(client: BackendClient, applicant_id: str) -> list[MyApplicationView]:
    res = (
        client.table("applications")
        .select("*")
        .eq("applicant_id", applicant_id)
        .order("created_at", desc=True)
        .execute()
    )
    raise_for_error(res.error, action="load applications")
    rows = res.data or []
    if not rows:
        return []

    jobs_res = client.table("job_postings").select(
        "id, title, location, start_date, hourly_rate"
    ).in_("id", {r["job_id"] for r in rows}).execute()
    raise_for_error(jobs_res.error, action="load applications")
    jobs = {j["id"]: JobSummary(**j) for j in jobs_res.data or []}

    return [MyApplicationView(**r, job=jobs.get(r["job_id"])) for r in rows]


def listings(jobs: Iterable[OpenJobView], applications: Iterable[ApplicationSchema], user_location: Optional[str]) -> list[JobListing]:
    applications = list(applications)
    out = []
    for job in jobs:
        app = application_for_job(applications, job.id)
        out.append(JobListing(
            **job.model_dump(),
            nearby=is_nearby(job.location, user_location),
            application_status=app.status if app else None,
        ))
    return out
