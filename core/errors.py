"""
Error taxonomy shared by every service.

Each error is an HTTPException so the routers can let it propagate untouched;
`status_code` and `detail` are what the caller gets to see.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import HTTPException

from client.contract import BackendErrorInfo, TABLE_NOT_FOUND, UNIQUE_VIOLATION

logger = logging.getLogger(__name__)


class StaffingError(HTTPException):
    http_status: int = 500
    default_detail: str = "Something went wrong"

    def __init__(self, detail: Any = None):
        super().__init__(status_code=self.http_status, detail=detail or self.default_detail)


# ---------- client-detected preconditions ----------

class ValidationError(StaffingError):
    http_status = 422
    default_detail = "Please fill in all required fields"


class MissingFields(ValidationError):
    default_detail = "Please fill in all fields"


class InvalidTransition(ValidationError):
    default_detail = "This application can no longer change to that state"


class NotFound(StaffingError):
    http_status = 404
    default_detail = "Not found"


# ---------- auth ----------

class AuthError(StaffingError):
    http_status = 401
    default_detail = "Authentication failed"


class InvalidCredentials(AuthError):
    default_detail = "Invalid login credentials"


class RoleMismatch(StaffingError):
    http_status = 403

    def __init__(self, registered_role: str):
        self.registered_role = registered_role
        label = "an Organizer" if registered_role == "organizer" else "Staff"
        super().__init__(
            f"This account is registered as {label}. Please select the correct role."
        )


class ProfileFetchFailed(StaffingError):
    http_status = 404
    default_detail = "Error fetching user profile"


class ProfileCreationFailed(StaffingError):
    http_status = 500
    default_detail = "Error creating user profile"


# ---------- backend ----------

class BackendUnavailable(StaffingError):
    http_status = 503
    default_detail = "Database setup required. Please contact your administrator."


class Uncategorized(StaffingError):
    http_status = 500
    default_detail = "An error occurred"


# ---------- workflow conflicts ----------

class DuplicateReview(StaffingError):
    http_status = 409
    default_detail = "You have already reviewed this staff member for this job"


class AlreadyApplied(StaffingError):
    http_status = 409
    default_detail = "You have already applied to this job"


class NoActivePostings(StaffingError):
    http_status = 409
    default_detail = "No active job postings available"


class AssignmentRequired(StaffingError):
    """More than one active posting; the caller has to name the target."""
    http_status = 409

    def __init__(self, application_id: int, candidates: list):
        self.application_id = application_id
        self.candidates = candidates
        super().__init__({
            "message": "Choose which posting to hire this applicant for",
            "application_id": application_id,
            "candidate_posting_ids": [c.id for c in candidates],
        })


class OperationInProgress(StaffingError):
    http_status = 409
    default_detail = "Please wait for the previous request to finish"


def raise_for_error(
    error: Optional[BackendErrorInfo],
    *,
    action: str,
    conflict: Optional[type[StaffingError]] = None,
) -> None:
    """Translate a backend error onto the taxonomy; no-op when there is none."""
    if error is None:
        return
    if error.code == TABLE_NOT_FOUND:
        logger.error("%s: backend table missing (%s)", action, error.message)
        raise BackendUnavailable()
    if error.code == UNIQUE_VIOLATION and conflict is not None:
        raise conflict()
    logger.error("%s failed: [%s] %s", action, error.code, error.message)
    raise Uncategorized(f"Failed to {action}")
