# schemas/invitation.py
"""
Pydantic schemas for tenant invitation links.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from models.invitation_link import InvitationStatus
from schemas.lease import LeaseResponse


class InvitationCreateResponse(BaseModel):
     """A freshly created pending link and the URL to share with the tenant."""
     id: str
     apartment_id: str
     token: str
     status: InvitationStatus
     created_at: datetime
     invitation_url: str

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "id": "5d4c3b2a-1f0e-4d9c-8b7a-6f5e4d3c2b1a",
                    "apartment_id": "0b6d1c52-5a4e-4a57-a0f3-1b4a1d5f6e01",
                    "token": "q0v5J9mQm1wH3pXv1a6rY8u2bC4dE7fG9hJkLmNoPqR",
                    "status": "pending",
                    "created_at": "2026-01-31T10:30:00",
                    "invitation_url": "http://localhost:4321/register/tenant?token=q0v5J9mQm1wH3pXv1a6rY8u2bC4dE7fG9hJkLmNoPqR",
               }
          }
     )


class AcceptedBy(BaseModel):
     id: str
     full_name: str

     model_config = ConfigDict(from_attributes=True)


class InvitationListItem(BaseModel):
     id: str
     token: str
     status: InvitationStatus
     created_at: datetime
     accepted_by: Optional[AcceptedBy] = None


class InvitationListResponse(BaseModel):
     invitations: List[InvitationListItem]


class InvitationApartment(BaseModel):
     name: str
     address: str


class InvitationOwner(BaseModel):
     full_name: str


class ValidateInvitationResponse(BaseModel):
     """Public view of a pending invitation; nothing beyond name, address and owner name."""
     valid: bool = True
     apartment: InvitationApartment
     owner: InvitationOwner


class AcceptInvitationResponse(BaseModel):
     lease: LeaseResponse
