from fastapi import APIRouter, Depends, HTTPException, status

from application.service import get_application
from application.workflow import WorkflowState
from auth.services.auth_service import get_current_active_user, get_session_client
from authz.deps import get_workflow_state, require_organizer
from client.sql_client import SqlBackendClient
from user.schemas import UserProfileSchema
from .schema import ReviewCreatePayload, ReviewSchema, StaffRating
from review import service

review_router = APIRouter(prefix="/reviews", tags=["Reviews"])


@review_router.post("", response_model=ReviewSchema, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreatePayload,
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
    state: WorkflowState = Depends(get_workflow_state),
):
    return service.submit_review(client, state, user.id, payload.application_id, payload.rating, payload.comment)


@review_router.get("/applications/{application_id}")
def review_status(
    application_id: int,
    user: UserProfileSchema = Depends(require_organizer),
    client: SqlBackendClient = Depends(get_session_client),
    state: WorkflowState = Depends(get_workflow_state),
):
    app = get_application(client, application_id)
    if app is None:
        raise HTTPException(status_code=404, detail="Application not found")
    return {"application_id": application_id, "reviewed": service.has_reviewed(state, app)}


@review_router.get("/staff/{staff_id}", response_model=StaffRating)
def staff_reviews(
    staff_id: str,
    user: UserProfileSchema = Depends(get_current_active_user),
    client: SqlBackendClient = Depends(get_session_client),
):
    reviews = service.list_reviews_for_staff(client, staff_id)
    return StaffRating(
        staff_id=staff_id,
        average_rating=service.average_rating(reviews),
        review_count=len(reviews),
        reviews=reviews,
    )
