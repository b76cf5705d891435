from __future__ import annotations
import logging
from typing import Iterable, Optional

from application.models import ApplicationStatus
from application.service import get_application
from application.workflow import WorkflowState
from client.contract import BackendClient
from core.errors import DuplicateReview, NotFound, ValidationError, raise_for_error
from .schema import ReviewSchema

logger = logging.getLogger(__name__)


def has_reviewed(state: WorkflowState, application) -> bool:
    return (application.applicant_id, application.job_id) in state.reviewed


def submit_review(
    client: BackendClient,
    state: WorkflowState,
    organizer_id: str,
    application_id: int,
    rating: int,
    comment: str = "",
) -> ReviewSchema:
    with state.latch.hold("review"):
        if not rating:
            raise ValidationError("Please select a rating")
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")

        app = get_application(client, application_id)
        if app is None:
            raise NotFound("Application not found")
        if app.status != ApplicationStatus.accepted:
            raise ValidationError("Only hired staff can be reviewed")
        if has_reviewed(state, app):
            raise DuplicateReview()

        res = client.table("reviews").insert({
            "organizer_id": organizer_id,
            "staff_id": app.applicant_id,
            "job_id": app.job_id,
            "application_id": app.id,
            "rating": rating,
            "comment": comment,
        }).single().execute()
        raise_for_error(res.error, action="submit review", conflict=DuplicateReview)

        state.reviewed.add((app.applicant_id, app.job_id))
        logger.info("organizer %s reviewed staff %s for job %s", organizer_id, app.applicant_id, app.job_id)
        return ReviewSchema.model_validate(res.data)


def list_reviews_for_staff(client: BackendClient, staff_id: str) -> list[ReviewSchema]:
    res = (
        client.table("reviews")
        .select("*")
        .eq("staff_id", staff_id)
        .order("created_at", desc=True)
        .execute()
    )
    raise_for_error(res.error, action="load reviews")
    return [ReviewSchema.model_validate(r) for r in res.data or []]


def average_rating(reviews: Iterable[ReviewSchema]) -> Optional[float]:
    ratings = [r.rating for r in reviews]
    if not ratings:
        return None
    return round(sum(ratings) / len(ratings), 1)
