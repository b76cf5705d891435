from fastapi import Depends, HTTPException
from auth.services.auth_service import get_current_active_user
from application.workflow import WorkflowState, registry
from user.models import UserRole
from user.schemas import UserProfileSchema


def require_organizer(user: UserProfileSchema = Depends(get_current_active_user)) -> UserProfileSchema:
    if user.role != UserRole.organizer:
        raise HTTPException(status_code=403, detail="Organizer role required")
    return user


def require_staff(user: UserProfileSchema = Depends(get_current_active_user)) -> UserProfileSchema:
    if user.role != UserRole.staff:
        raise HTTPException(status_code=403, detail="Staff role required")
    return user


def get_workflow_state(user: UserProfileSchema = Depends(get_current_active_user)) -> WorkflowState:
    return registry.for_user(user.id)
