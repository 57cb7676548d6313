# schemas/user.py
"""
Pydantic schemas for the current user's profile.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.user import UserRole


class UserProfileResponse(BaseModel):
     """Profile of the authenticated user."""
     id: str
     full_name: str
     email: str
     role: UserRole
     created_at: datetime

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": "3f1c2a9e-7b7e-4f43-9a55-1c0a9f0e2d11",
                    "full_name": "Anna Kowalska",
                    "email": "anna@example.com",
                    "role": "owner",
                    "created_at": "2026-01-31T10:30:00",
               }
          },
     )


class UserProfileUpdate(BaseModel):
     """Only the display name is editable; role and email are fixed at signup."""
     full_name: str = Field(..., min_length=2, max_length=100)

     model_config = ConfigDict(
          extra="forbid",
          json_schema_extra={"example": {"full_name": "Anna Nowak"}},
     )
