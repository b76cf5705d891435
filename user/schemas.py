from typing import Optional
from pydantic import BaseModel, ConfigDict

from .models import UserRole


class UserProfileSchema(BaseModel):
    id: str
    email: str
    role: UserRole
    full_name: str
    phone: str
    company: Optional[str] = None
    location: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


# Form payloads stay permissive; the auth gate validates them in a fixed order.
class SignupPayload(BaseModel):
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    full_name: str = ""
    phone: str = ""
    company: Optional[str] = None
    location: Optional[str] = None
    role: UserRole = UserRole.staff


class LoginPayload(BaseModel):
    email: str = ""
    password: str = ""
    role: UserRole


class ProfileSummary(BaseModel):
    full_name: str = "Unknown"
    company: Optional[str] = "Event Organizer"
