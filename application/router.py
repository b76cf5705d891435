from fastapi import APIRouter, Depends

from auth.services.auth_service import get_session_client
from authz.deps import get_workflow_state, require_organizer
from client.sql_client import SqlBackendClient
from posting.service import list_postings
from user.schemas import UserProfileSchema
from .schemas import AcceptPayload, ApplicantView, AssignPayload, HireResult, RejectResult
from .workflow import ApplicationWorkflow, WorkflowState
from application import service

application_router = APIRouter(prefix="/applications", tags=["Applications"])


def get_workflow(
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
    state: WorkflowState = Depends(get_workflow_state),
) -> ApplicationWorkflow:
    return ApplicationWorkflow(client, user.id, state)


# Applicants across all of the organizer's postings, rejected ones hidden
@application_router.get("", response_model=list[ApplicantView])
def list_applicants(
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
    state: WorkflowState = Depends(get_workflow_state),
):
    postings = list_postings(client, user.id)
    return state.visible(service.load_applicants(client, postings))


@application_router.post("/{application_id}/accept", response_model=HireResult)
def accept_applicant(
    application_id: int,
    payload: AcceptPayload | None = None,
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    return workflow.accept(application_id, payload.posting_id if payload else None)


@application_router.post("/{application_id}/assign", response_model=HireResult)
def assign_applicant(
    application_id: int,
    payload: AssignPayload,
    workflow: ApplicationWorkflow = Depends(get_workflow),
):
    return workflow.assign(application_id, payload.posting_id)


@application_router.post("/{application_id}/reject", response_model=RejectResult)
def reject_applicant(application_id: int, workflow: ApplicationWorkflow = Depends(get_workflow)):
    return workflow.reject(application_id)
