from typing import Optional
from fastapi import APIRouter, Depends, Query

from application.workflow import WorkflowState
from auth.services.auth_service import get_current_active_user, get_session_client
from authz.deps import get_workflow_state
from client.sql_client import SqlBackendClient
from user.schemas import UserProfileSchema
from .schema import OrganizerDashboard, StaffDashboard
from dashboard import service

dashboard_router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@dashboard_router.get("", response_model=OrganizerDashboard | StaffDashboard)
def dashboard(
    q: Optional[str] = Query(None),
    user: UserProfileSchema = Depends(get_current_active_user),
    client: SqlBackendClient = Depends(get_session_client),
    state: WorkflowState = Depends(get_workflow_state),
):
    return service.load_dashboard(client, user, state, q or "")
