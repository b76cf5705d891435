import threading
import time

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from auth.utils.auth_utils import decode_access_token
from client.sql_client import SqlBackendClient
from core.database import get_db
from core.errors import ProfileFetchFailed
from user.schemas import UserProfileSchema
from user.service import get_profile

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


class RevokedTokens:
    """In-process deny list of logged-out token ids, kept until each token expires."""

    def __init__(self) -> None:
        self._expiry: dict[str, float] = {}
        self._lock = threading.Lock()

    def revoke(self, jti: str, exp: float) -> None:
        now = time.time()
        with self._lock:
            self._expiry = {k: v for k, v in self._expiry.items() if v > now}
            self._expiry[jti] = exp

    def is_revoked(self, jti: str) -> bool:
        with self._lock:
            return jti in self._expiry


revoked_tokens = RevokedTokens()


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _token_claims(token: str):
    payload = decode_access_token(token)
    if payload is None or not payload.get("sub"):
        return None
    if payload.get("jti") and revoked_tokens.is_revoked(payload["jti"]):
        return None
    return payload


def revoke_access_token(token: str) -> None:
    payload = decode_access_token(token)
    if payload and payload.get("jti"):
        revoked_tokens.revoke(payload["jti"], float(payload.get("exp", time.time())))


def get_backend_client(db: Session = Depends(get_db)) -> SqlBackendClient:
    """Signed-out client; used by login and signup."""
    return SqlBackendClient(db)


def get_current_active_user(
    token: str = Depends(oauth2_scheme),
    client: SqlBackendClient = Depends(get_backend_client),
) -> UserProfileSchema:
    payload = _token_claims(token)
    if payload is None:
        raise _credentials_exception()
    try:
        return get_profile(client, payload["sub"])
    except ProfileFetchFailed:
        raise _credentials_exception()


def get_session_client(
    user: UserProfileSchema = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> SqlBackendClient:
    """Client restored to the token's identity."""
    return SqlBackendClient.for_user_id(db, user.id)


def get_identity_client(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> SqlBackendClient:
    """Client for a valid token whose identity may not have a profile yet."""
    payload = _token_claims(token)
    client = SqlBackendClient.for_user_id(db, payload["sub"]) if payload else None
    if client is None or client.get_user() is None:
        raise _credentials_exception()
    return client
