# posting/service.py
from __future__ import annotations
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from client.contract import BackendClient
from core.errors import NotFound, ValidationError, raise_for_error
from .models import PostingStatus
from .schemas import DashboardStats, JobPostingCreatePayload, JobPostingSchema, JobPostingUpdate

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")


def derive_status(hired: int, positions_needed: int) -> PostingStatus:
    return PostingStatus.filled if hired >= positions_needed else PostingStatus.active


def parse_hourly_rate(value: Union[int, str, None]) -> int:
    """'$25/hr' -> 25. Everything that is not a digit is dropped before parsing."""
    digits = _NON_DIGITS.sub("", str(value if value is not None else ""))
    if not digits:
        raise ValidationError("Please enter an hourly rate")
    return int(digits)


def parse_positions(value: Union[int, str, None]) -> int:
    try:
        positions = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("Positions needed must be a whole number")
    if positions < 1:
        raise ValidationError("Positions needed must be at least 1")
    return positions


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def create_posting(client: BackendClient, organizer_id: str, payload: JobPostingCreatePayload) -> JobPostingSchema:
    required = (payload.title, payload.start_date, payload.location,
                payload.positions_needed, payload.hourly_rate, payload.role)
    if any(v is None or (isinstance(v, str) and not v.strip()) for v in required):
        raise ValidationError("Please fill in all required fields")

    end_date = payload.end_date or payload.start_date
    if end_date < payload.start_date:
        raise ValidationError("End date cannot be before the start date")

    positions = parse_positions(payload.positions_needed)
    res = client.table("job_postings").insert({
        "organizer_id": organizer_id,
        "title": payload.title,
        "description": payload.description,
        "start_date": payload.start_date,
        "end_date": end_date,
        "start_time": payload.start_time,
        "end_time": payload.end_time,
        "location": payload.location,
        "positions_needed": positions,
        "hourly_rate": parse_hourly_rate(payload.hourly_rate),
        "role": payload.role,
        "hired": 0,
        "status": derive_status(0, positions),
    }).single().execute()
    raise_for_error(res.error, action="post job")
    posting = JobPostingSchema.model_validate(res.data)
    logger.info("organizer %s posted job %s (%s positions)", organizer_id, posting.id, positions)
    return posting


def list_postings(client: BackendClient, organizer_id: str) -> list[JobPostingSchema]:
    res = (
        client.table("job_postings")
        .select("*")
        .eq("organizer_id", organizer_id)
        .order("created_at", desc=True)
        .execute()
    )
    raise_for_error(res.error, action="load job postings")
    return [JobPostingSchema.model_validate(row) for row in res.data or []]


def get_posting(client: BackendClient, posting_id: int) -> Optional[JobPostingSchema]:
    res = client.table("job_postings").select("*").eq("id", posting_id).execute()
    raise_for_error(res.error, action="load job posting")
    rows = res.data or []
    return JobPostingSchema.model_validate(rows[0]) if rows else None


def get_posting_for_organizer(client: BackendClient, posting_id: int, organizer_id: str) -> Optional[JobPostingSchema]:
    posting = get_posting(client, posting_id)
    if posting is None or posting.organizer_id != organizer_id:
        return None
    return posting


def _write(client: BackendClient, posting_id: int, values: dict, action: str) -> JobPostingSchema:
    res = client.table("job_postings").update(values).eq("id", posting_id).execute()
    raise_for_error(res.error, action=action)
    # re-read so callers only ever see what the backend holds
    posting = get_posting(client, posting_id)
    if posting is None:
        raise NotFound("Job posting not found")
    return posting


def update_posting(
    client: BackendClient,
    organizer_id: str,
    posting_id: int,
    patch: JobPostingUpdate,
) -> JobPostingSchema:
    posting = get_posting_for_organizer(client, posting_id, organizer_id)
    if posting is None:
        raise NotFound("Job posting not found")

    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    if "hourly_rate" in data:
        data["hourly_rate"] = parse_hourly_rate(data["hourly_rate"])

    new_start = data.get("start_date", posting.start_date)
    new_end = data.get("end_date", posting.end_date)
    if new_end < new_start:
        raise ValidationError("End date cannot be before the start date")

    positions = data.get("positions_needed", posting.positions_needed)
    if positions < posting.hired:
        raise ValidationError(
            f"Positions needed cannot drop below the {posting.hired} staff already hired"
        )
    data["status"] = derive_status(posting.hired, positions)
    return _write(client, posting_id, data, action="update job posting")


def set_hired(client: BackendClient, posting: JobPostingSchema, hired: int) -> JobPostingSchema:
    """Only write path for the hire count; status is re-derived alongside it."""
    hired = max(0, hired)
    return _write(
        client,
        posting.id,
        {"hired": hired, "status": derive_status(hired, posting.positions_needed)},
        action="update hire count",
    )


def active_postings(postings: Iterable[JobPostingSchema]) -> list[JobPostingSchema]:
    return [p for p in postings if p.status == PostingStatus.active]


def compute_stats(postings, applications, since: Optional[datetime] = None) -> DashboardStats:
    postings = list(postings)
    applications = list(applications)
    accepted = [a for a in applications if a.status == "accepted"]
    if since is not None:
        accepted = [a for a in accepted if a.created_at and _aware(a.created_at) >= _aware(since)]
    return DashboardStats(
        active_postings=len(active_postings(postings)),
        total_applicants=len(applications),
        hired=len(accepted),
    )
