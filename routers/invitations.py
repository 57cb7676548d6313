# routers/invitations.py
"""
Invitation API routes.

- Owner: creates and lists invitation links for own apartments
- Public: checks a token (name, address and owner name only)
- Tenant: accepts a token, which creates the active lease
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_owner, require_tenant
from models import User
from schemas.invitation import (
     AcceptedBy,
     AcceptInvitationResponse,
     InvitationApartment,
     InvitationCreateResponse,
     InvitationListItem,
     InvitationListResponse,
     InvitationOwner,
     ValidateInvitationResponse,
)
from schemas.lease import LeaseResponse
from services.invitation_service import InvitationService

router = APIRouter(prefix="/api", tags=["invitations"])


@router.post(
     "/apartments/{apartment_id}/invitations",
     response_model=InvitationCreateResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create an invitation link"
)
def create_invitation(
     apartment_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     """
     Create a new pending invitation for an apartment without a tenant.
     Any earlier pending link for the apartment stops working.
     """
     link, url = InvitationService.create_invitation(db, apartment_id, owner)
     return InvitationCreateResponse(
          id=link.id,
          apartment_id=link.apartment_id,
          token=link.token,
          status=link.status,
          created_at=link.created_at,
          invitation_url=url,
     )


@router.get(
     "/apartments/{apartment_id}/invitations",
     response_model=InvitationListResponse,
     summary="List invitation links of an apartment"
)
def list_invitations(
     apartment_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     links = InvitationService.list_invitations(db, apartment_id, owner)
     return InvitationListResponse(
          invitations=[
               InvitationListItem(
                    id=link.id,
                    token=link.token,
                    status=link.status,
                    created_at=link.created_at,
                    accepted_by=AcceptedBy.model_validate(link.accepted_by_user) if link.accepted_by_user else None,
               )
               for link in links
          ]
     )


@router.get(
     "/invitations/{token}",
     response_model=ValidateInvitationResponse,
     summary="Check an invitation token"
)
def validate_invitation(token: str, db: Session = Depends(get_session)):
     """
     Public endpoint. Unknown, expired and already accepted tokens all
     answer `invalid_token`.
     """
     link = InvitationService.validate_token(db, token)
     return ValidateInvitationResponse(
          apartment=InvitationApartment(name=link.apartment.name, address=link.apartment.address),
          owner=InvitationOwner(full_name=link.apartment.owner.full_name),
     )


@router.post(
     "/invitations/{token}/accept",
     response_model=AcceptInvitationResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Accept an invitation"
)
def accept_invitation(
     token: str,
     db: Session = Depends(get_session),
     tenant: User = Depends(require_tenant)
):
     lease = InvitationService.accept_invitation(db, token, tenant)
     return AcceptInvitationResponse(lease=LeaseResponse.model_validate(lease))
