from fastapi import APIRouter, Depends

from auth.services.auth_service import get_current_active_user
from user.schemas import UserProfileSchema

user_router = APIRouter(
    prefix='/users',
    tags=['Users']
)


# Get current user
@user_router.get('/me', response_model=UserProfileSchema)
def current_user(user: UserProfileSchema = Depends(get_current_active_user)):
    return user
