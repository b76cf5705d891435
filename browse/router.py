from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from application.schemas import ApplicationPayload, ApplicationSchema, MyApplicationView
from application.workflow import WorkflowState
from auth.services.auth_service import get_session_client
from authz.deps import get_workflow_state, require_staff
from client.sql_client import SqlBackendClient
from posting.models import PostingStatus
from posting.service import get_posting
from user.schemas import UserProfileSchema
from .schema import JobListing
from browse import service

browse_router = APIRouter(prefix="/jobs", tags=["Jobs"])


@browse_router.get("", response_model=list[JobListing])
def list_jobs(
    q: Optional[str] = Query(None, description="Search title, location, role, description"),
    nearby_only: bool = False,
    user: UserProfileSchema = Depends(require_staff),
    client: SqlBackendClient = Depends(get_session_client),
):
    jobs = service.search(service.list_open_jobs(client), q or "")
    rows = service.listings(jobs, service.my_applications(client, user.id), user.location)
    if nearby_only:
        rows = [r for r in rows if r.nearby]
    return rows


@browse_router.get("/applications/me", response_model=list[MyApplicationView])
def my_applications(
    user: UserProfileSchema = Depends(require_staff),
    client: SqlBackendClient = Depends(get_session_client),
):
    return service.my_applications(client, user.id)


@browse_router.post("/{job_id}/apply", response_model=ApplicationSchema, status_code=status.HTTP_201_CREATED)
def apply_to_job(
    job_id: int,
    payload: ApplicationPayload,
    user: UserProfileSchema = Depends(require_staff),
    client: SqlBackendClient = Depends(get_session_client),
    state: WorkflowState = Depends(get_workflow_state),
):
    job = get_posting(client, job_id)
    if job is None or job.status != PostingStatus.active:
        raise HTTPException(status_code=404, detail="Job not found")
    known = service.my_applications(client, user.id)
    return service.apply(client, user.id, job, payload.cover_letter, payload.availability, known, latch=state.latch)
