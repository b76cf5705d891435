"""
Accept / reject / assign coordination for an organizer's applicants.

Hire counts live on the postings; which posting an applicant was hired
against, who was rejected and what was reviewed this session live on an
explicit WorkflowState owned by the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from client.contract import BackendClient
from core.errors import (
    AssignmentRequired,
    InvalidTransition,
    NoActivePostings,
    NotFound,
    ValidationError,
)
from core.latch import ActionLatch
from posting.schemas import JobPostingSchema
from posting.service import active_postings, list_postings, set_hired
from .models import ApplicationStatus
from .schemas import ApplicationSchema, HireResult, RejectResult
from .service import get_application, set_application_status

logger = logging.getLogger(__name__)


@dataclass
class WorkflowState:
    rejected: set[int] = field(default_factory=set)
    # application id -> posting id; mirrors applications.hired_posting_id for this session
    accepted: dict[int, int] = field(default_factory=dict)
    pending_assignment: Optional[int] = None
    # (staff_id, job_id)
    reviewed: set[tuple[str, int]] = field(default_factory=set)
    latch: ActionLatch = field(default_factory=ActionLatch)

    def mark_accepted(self, application_id: int, posting_id: int) -> None:
        self.accepted[application_id] = posting_id
        self.rejected.discard(application_id)
        if self.pending_assignment == application_id:
            self.pending_assignment = None

    def mark_rejected(self, application_id: int) -> None:
        self.rejected.add(application_id)
        self.accepted.pop(application_id, None)
        if self.pending_assignment == application_id:
            self.pending_assignment = None

    def is_rejected(self, application) -> bool:
        return application.id in self.rejected or application.status == ApplicationStatus.rejected

    def visible(self, applications: Iterable) -> list:
        """Applicant list minus everyone rejected; the records themselves stay."""
        return [a for a in applications if not self.is_rejected(a)]


class WorkflowStateRegistry:
    """In-process WorkflowState per signed-in user."""

    def __init__(self) -> None:
        self._states: dict[str, WorkflowState] = {}

    def for_user(self, user_id: str) -> WorkflowState:
        return self._states.setdefault(user_id, WorkflowState())

    def drop(self, user_id: str) -> None:
        self._states.pop(user_id, None)


registry = WorkflowStateRegistry()

# every hire-count mutation in a session runs under this one latch key
HIRING = "hiring"


def _by_id(postings: Iterable[JobPostingSchema], posting_id: int) -> Optional[JobPostingSchema]:
    return next((p for p in postings if p.id == posting_id), None)


def hired_on(app: ApplicationSchema) -> Optional[int]:
    """Posting an accepted application is counted against; None unless accepted."""
    if app.status != ApplicationStatus.accepted:
        return None
    return app.hired_posting_id or app.job_id


class ApplicationWorkflow:
    def __init__(self, client: BackendClient, organizer_id: str, state: WorkflowState):
        self.client = client
        self.organizer_id = organizer_id
        self.state = state

    # ---------- lookups ----------

    def _postings(self) -> list[JobPostingSchema]:
        return list_postings(self.client, self.organizer_id)

    def _application(self, application_id: int, postings: list[JobPostingSchema]) -> ApplicationSchema:
        app = get_application(self.client, application_id)
        if app is None or _by_id(postings, app.job_id) is None:
            raise NotFound("Application not found")
        return app

    def _active_target(self, postings: list[JobPostingSchema], posting_id: int) -> JobPostingSchema:
        target = _by_id(active_postings(postings), posting_id)
        if target is None:
            raise ValidationError("That posting is not accepting new hires")
        return target

    # ---------- transitions ----------

    def accept(self, application_id: int, target_posting_id: Optional[int] = None) -> HireResult:
        """
        Hire an applicant.

        Without a target the hire goes to the organizer's only active posting;
        with several active postings the applicant is parked for assign() and
        AssignmentRequired is raised. Accepting again against a different
        posting moves the hire there. The posting a hire counts against is
        stored on the application, so a later session sees the same mapping.
        """
        with self.state.latch.hold(HIRING):
            postings = self._postings()
            app = self._application(application_id, postings)
            if self.state.is_rejected(app):
                raise InvalidTransition("Rejected applications cannot be hired")

            current = hired_on(app)
            if target_posting_id is None:
                if current is not None:
                    return self._unchanged(app, postings, current)
                active = active_postings(postings)
                if not active:
                    raise NoActivePostings()
                if len(active) > 1:
                    self.state.pending_assignment = app.id
                    raise AssignmentRequired(app.id, active)
                target = active[0]
            else:
                if current == target_posting_id:
                    return self._unchanged(app, postings, current)
                target = self._active_target(postings, target_posting_id)

            return self._commit(app, target, postings, current)

    def assign(self, application_id: int, posting_id: int) -> HireResult:
        with self.state.latch.hold(HIRING):
            if self.state.pending_assignment != application_id:
                raise ValidationError("This applicant is not waiting for a posting assignment")
            postings = self._postings()
            app = self._application(application_id, postings)
            current = hired_on(app)
            if current == posting_id:
                self.state.mark_accepted(app.id, current)
                return self._unchanged(app, postings, current)
            target = self._active_target(postings, posting_id)
            return self._commit(app, target, postings, current)

    def reject(self, application_id: int) -> RejectResult:
        with self.state.latch.hold(HIRING):
            postings = self._postings()
            app = self._application(application_id, postings)
            if app.status == ApplicationStatus.rejected:
                self.state.mark_rejected(app.id)
                return RejectResult(application=app)

            released = None
            current = hired_on(app)
            if current is not None:
                posting = _by_id(postings, current)
                if posting is not None:
                    released = set_hired(self.client, posting, posting.hired - 1)

            updated = set_application_status(self.client, app.id, ApplicationStatus.rejected)
            self.state.mark_rejected(app.id)
            logger.info("organizer %s rejected application %s", self.organizer_id, app.id)
            return RejectResult(application=updated, released_posting=released)

    def visible_applicants(self, applications: Iterable) -> list:
        return self.state.visible(applications)

    # ---------- internals ----------

    def _unchanged(self, app: ApplicationSchema, postings: list[JobPostingSchema], posting_id: int) -> HireResult:
        posting = _by_id(postings, posting_id)
        if posting is None:
            raise NotFound("Job posting not found")
        self.state.accepted[app.id] = posting_id
        return HireResult(application=app, posting=posting)

    def _commit(
        self,
        app: ApplicationSchema,
        target: JobPostingSchema,
        postings: list[JobPostingSchema],
        current: Optional[int],
    ) -> HireResult:
        previous = None
        if current is not None and current != target.id:
            old = _by_id(postings, current)
            if old is not None:
                previous = set_hired(self.client, old, old.hired - 1)

        posting = set_hired(self.client, target, target.hired + 1)
        updated = set_application_status(self.client, app.id, ApplicationStatus.accepted, posting.id)
        self.state.mark_accepted(app.id, posting.id)
        logger.info("application %s hired for posting %s (%s/%s)",
                    app.id, posting.id, posting.hired, posting.positions_needed)
        return HireResult(application=updated, posting=posting, previous_posting=previous)
