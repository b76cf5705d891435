from __future__ import annotations
from typing import Iterable

from client.contract import BackendClient
from core.errors import ProfileFetchFailed, raise_for_error
from .models import UserRole
from .schemas import UserProfileSchema, SignupPayload


def get_profile(client: BackendClient, user_id: str) -> UserProfileSchema:
    res = client.table("user_profiles").select("*").eq("id", user_id).single().execute()
    if res.error is not None:
        raise ProfileFetchFailed()
    return UserProfileSchema.model_validate(res.data)


def get_profiles(client: BackendClient, user_ids: Iterable[str], columns: str = "*") -> dict[str, dict]:
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        return {}
    res = client.table("user_profiles").select(columns).in_("id", ids).execute()
    raise_for_error(res.error, action="load user profiles")
    return {row["id"]: row for row in res.data or []}


def upsert_profile(
    client: BackendClient,
    user_id: str,
    payload: SignupPayload,
    role: UserRole,
) -> UserProfileSchema:
    """Create or overwrite the profile for an identity; safe to repeat."""
    email = payload.email.strip().lower()
    res = client.table("user_profiles").upsert({
        "id": user_id,
        "email": email,
        "role": role,
        "full_name": payload.full_name,
        "phone": payload.phone,
        "company": payload.company if role == UserRole.organizer else None,
        "location": payload.location or None,
    }).single().execute()
    raise_for_error(res.error, action="create user profile")
    return UserProfileSchema.model_validate(res.data)
