# routers/users.py
"""
Current-user profile routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import User
from schemas.user import UserProfileResponse, UserProfileUpdate
from services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get(
     "/me",
     response_model=UserProfileResponse,
     summary="Get the current user's profile"
)
def get_me(user: User = Depends(get_current_user)):
     return UserProfileResponse.model_validate(user)


@router.patch(
     "/me",
     response_model=UserProfileResponse,
     summary="Update the current user's display name"
)
def update_me(
     body: UserProfileUpdate,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user)
):
     """
     Only **full_name** can be changed; role and email are fixed at signup.
     """
     user = UserService.update_full_name(db, user, body.full_name)
     return UserProfileResponse.model_validate(user)
