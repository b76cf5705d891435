from fastapi import APIRouter, Depends, HTTPException, status

from application import service as application_service
from application.schemas import ApplicantView
from application.workflow import WorkflowState
from auth.services.auth_service import get_session_client
from authz.deps import get_workflow_state, require_organizer
from client.sql_client import SqlBackendClient
from user.schemas import UserProfileSchema
from .schemas import JobPostingCreatePayload, JobPostingSchema, JobPostingUpdate
from posting import service

posting_router = APIRouter(prefix="/postings", tags=["Postings"])


@posting_router.get("", response_model=list[JobPostingSchema])
def list_postings(
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
):
    return service.list_postings(client, user.id)


@posting_router.post("", response_model=JobPostingSchema, status_code=status.HTTP_201_CREATED)
def create_posting(
    payload: JobPostingCreatePayload,
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
):
    return service.create_posting(client, user.id, payload)


@posting_router.get("/{posting_id}", response_model=JobPostingSchema)
def get_posting(
    posting_id: int,
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
):
    obj = service.get_posting_for_organizer(client, posting_id, user.id)
    if not obj:
        raise HTTPException(status_code=404, detail="Job posting not found")
    return obj


@posting_router.patch("/{posting_id}", response_model=JobPostingSchema)
def patch_posting(
    posting_id: int,
    payload: JobPostingUpdate,
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
):
    return service.update_posting(client, user.id, posting_id, payload)


@posting_router.get("/{posting_id}/applicants", response_model=list[ApplicantView])
def posting_applicants(
    posting_id: int,
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
    state: WorkflowState = Depends(get_workflow_state),
):
    posting = service.get_posting_for_organizer(client, posting_id, user.id)
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")
    applicants = application_service.load_applicants(client, [posting])
    return state.visible(application_service.applicants_for_posting(applicants, posting_id))
