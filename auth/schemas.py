from pydantic import BaseModel

from client.contract import AuthUser
from user.schemas import UserProfileSchema


class AuthSession(BaseModel):
    user: AuthUser
    profile: UserProfileSchema
    access_token: str
    token_type: str = "bearer"
