from fastapi import APIRouter, Depends, status

from application.workflow import registry
from auth.schemas import AuthSession
from auth.services import role_gate
from auth.services.auth_service import (
    get_backend_client,
    get_current_active_user,
    get_identity_client,
    get_session_client,
    oauth2_scheme,
    revoke_access_token,
)
from client.sql_client import SqlBackendClient
from user.schemas import LoginPayload, SignupPayload, UserProfileSchema

auth_router = APIRouter(prefix="/auth", tags=["Auth"])


@auth_router.post("/signup", response_model=AuthSession, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupPayload, client: SqlBackendClient = Depends(get_backend_client)):
    return role_gate.signup(client, payload, payload.role)


@auth_router.post("/login", response_model=AuthSession)
def login(payload: LoginPayload, client: SqlBackendClient = Depends(get_backend_client)):
    return role_gate.login(client, payload.email, payload.password, payload.role)


# Finish an identity whose profile write failed during signup
@auth_router.post("/profile", response_model=AuthSession)
def complete_profile(payload: SignupPayload, client: SqlBackendClient = Depends(get_identity_client)):
    return role_gate.complete_profile(client, payload, payload.role)


@auth_router.post("/logout")
def logout(
    token: str = Depends(oauth2_scheme),
    user: UserProfileSchema = Depends(get_current_active_user),
    client: SqlBackendClient = Depends(get_session_client),
):
    role_gate.logout(client)
    revoke_access_token(token)
    registry.drop(user.id)
    return {"message": "Logged out"}
