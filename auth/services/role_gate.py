"""
Login and signup with role reconciliation.

The role picked on the login form has to match the role stored on the profile
at signup; a mismatch signs the fresh session out again before failing.
"""
from __future__ import annotations

import logging
import re

from auth.schemas import AuthSession
from auth.utils.auth_utils import create_access_token
from client.contract import AuthUser, BackendClient
from core.config_loader import settings
from core.errors import (
    AuthError,
    InvalidCredentials,
    ProfileCreationFailed,
    ProfileFetchFailed,
    RoleMismatch,
    StaffingError,
    ValidationError,
)
from user.models import UserRole
from user.schemas import SignupPayload, UserProfileSchema
from user.service import get_profile, upsert_profile

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _blank(value) -> bool:
    return not value or not str(value).strip()


def _session(user: AuthUser, profile: UserProfileSchema) -> AuthSession:
    token = create_access_token({"sub": user.id, "role": profile.role.value})
    return AuthSession(user=user, profile=profile, access_token=token)


def _validate_role_fields(payload: SignupPayload, role: UserRole) -> None:
    if role == UserRole.organizer and _blank(payload.company):
        raise ValidationError("Please enter your company or organization name")
    if role == UserRole.staff and _blank(payload.location):
        raise ValidationError("Please enter your location so we can show you nearby jobs")
    if role == UserRole.organizer and _blank(payload.location):
        raise ValidationError("Please enter your location")


def validate_signup(payload: SignupPayload, role: UserRole) -> None:
    """Raise ValidationError for the first failed precondition, in form order."""
    if any(_blank(v) for v in (payload.email, payload.password, payload.full_name, payload.phone)):
        raise ValidationError("Please fill in all required fields")
    if not EMAIL_RE.match(payload.email.strip()):
        raise ValidationError("Please enter a valid email address (e.g., user@example.com)")
    if payload.password != payload.confirm_password:
        raise ValidationError("Passwords do not match")
    if len(payload.password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
    _validate_role_fields(payload, role)


def _signup_error_message(message: str) -> str:
    lowered = message.lower()
    if "invalid" in lowered or "email" in lowered:
        return "Please enter a valid email address. Make sure it's in the format: user@example.com"
    if "already registered" in lowered:
        return "This email is already registered. Please try logging in instead."
    return message


def login(client: BackendClient, email: str, password: str, role: UserRole) -> AuthSession:
    if _blank(email) or _blank(password):
        raise ValidationError("Please enter email and password")

    resp = client.sign_in_with_password(email, password)
    if resp.error is not None or resp.user is None:
        raise InvalidCredentials(resp.error.message if resp.error else None)

    try:
        profile = get_profile(client, resp.user.id)
    except ProfileFetchFailed:
        client.sign_out()
        raise

    if profile.role != role:
        logger.info("login for %s refused: registered as %s, asked for %s",
                    resp.user.id, profile.role.value, role.value)
        client.sign_out()
        raise RoleMismatch(profile.role.value)

    return _session(resp.user, profile)


def signup(client: BackendClient, payload: SignupPayload, role: UserRole) -> AuthSession:
    validate_signup(payload, role)

    email = payload.email.strip().lower()
    resp = client.sign_up(email, payload.password, {"full_name": payload.full_name, "role": role.value})
    if resp.error is not None:
        logger.info("signup rejected by backend: [%s] %s", resp.error.code, resp.error.message)
        raise AuthError(_signup_error_message(resp.error.message))
    if resp.user is None:
        raise AuthError("Signup failed. Please try again.")

    try:
        profile = upsert_profile(client, resp.user.id, payload, role)
    except StaffingError as exc:
        # identity exists without a profile; complete_profile() can finish it later
        logger.warning("identity %s created without a profile: %s", resp.user.id, exc.detail)
        client.sign_out()
        raise ProfileCreationFailed(f"Error creating user profile: {exc.detail}")

    return _session(resp.user, profile)


def complete_profile(client: BackendClient, payload: SignupPayload, role: UserRole) -> AuthSession:
    """Write the missing profile for the signed-in identity."""
    user = client.get_user()
    if user is None:
        raise AuthError("Please log in to continue")
    if any(_blank(v) for v in (payload.full_name, payload.phone)):
        raise ValidationError("Please fill in all required fields")
    _validate_role_fields(payload, role)

    stored_role = user.user_metadata.get("role")
    if stored_role and stored_role != role.value:
        raise RoleMismatch(stored_role)

    payload = payload.model_copy(update={"email": user.email})
    profile = upsert_profile(client, user.id, payload, role)
    return _session(user, profile)


def logout(client: BackendClient) -> None:
    client.sign_out()
