# services/invitation_service.py
"""
Invitation Service - one-time tenant invitation links.

States: pending -> accepted | expired, both terminal. Creating a link
expires every pending link of the apartment in the same transaction, so at
most one link per apartment is pending (backed by a filtered unique index).
Links only expire by being superseded; there is no elapsed-time expiry.
"""
import logging
import secrets
from datetime import date
from typing import List, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from config import PUBLIC_APP_URL
from errors import (
     ActiveLeaseExists,
     ApartmentHasLease,
     InvalidToken,
     InvitationConflict,
     UserHasLease,
)
from models import Apartment, InvitationLink, InvitationStatus, Lease, LeaseStatus, User
from services.access import get_owned_apartment
from services.lease_service import get_active_lease, get_active_lease_for_tenant

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def generate_token() -> str:
     """URL-safe random token (43 characters)."""
     return secrets.token_urlsafe(TOKEN_BYTES)


def build_invitation_url(token: str) -> str:
     return f"{PUBLIC_APP_URL}/register/tenant?token={token}"


class InvitationService:
     """Service class for the invitation state machine."""

     @staticmethod
     def create_invitation(db: Session, apartment_id: str, owner: User) -> Tuple[InvitationLink, str]:
          """
          Create a new pending invitation link for an apartment.

          Every earlier pending link of the apartment is expired first, in the
          same transaction.

          Args:
               db: SQLAlchemy database session
               apartment_id: Apartment the tenant is invited to
               owner: Caller; must own the apartment

          Returns:
               (InvitationLink, shareable invitation URL)

          Raises:
               ApartmentNotFound, Forbidden: Ownership check failed
               ActiveLeaseExists: The apartment already has a tenant
               InvitationConflict: A concurrent request created a pending link first
          """
          get_owned_apartment(db, apartment_id, owner)

          if get_active_lease(db, apartment_id) is not None:
               logger.info("Invitation rejected: apartment %s already has an active lease", apartment_id)
               raise ActiveLeaseExists()

          expired = db.execute(
               update(InvitationLink)
               .where(
                    InvitationLink.apartment_id == apartment_id,
                    InvitationLink.status == InvitationStatus.PENDING,
               )
               .values(status=InvitationStatus.EXPIRED)
               .execution_options(synchronize_session="fetch")
          ).rowcount

          link = InvitationLink(
               apartment_id=apartment_id,
               token=generate_token(),
               status=InvitationStatus.PENDING,
               created_by=owner.id,
          )
          db.add(link)
          try:
               db.commit()
          except IntegrityError as exc:
               db.rollback()
               logger.warning("Concurrent invitation creation for apartment %s", apartment_id)
               raise InvitationConflict() from exc
          db.refresh(link)

          logger.info(
               "Invitation %s created for apartment %s (%d pending link(s) expired)",
               link.id,
               apartment_id,
               expired or 0,
          )
          return link, build_invitation_url(link.token)

     @staticmethod
     def list_invitations(db: Session, apartment_id: str, owner: User) -> List[InvitationLink]:
          """All links of an apartment, newest first."""
          get_owned_apartment(db, apartment_id, owner)
          return (
               db.query(InvitationLink)
               .options(joinedload(InvitationLink.accepted_by_user))
               .filter(InvitationLink.apartment_id == apartment_id)
               .order_by(InvitationLink.created_at.desc(), InvitationLink.id.desc())
               .all()
          )

     @staticmethod
     def get_pending_link(db: Session, token: str) -> InvitationLink:
          """
          Raises:
               InvalidToken: Unknown, expired and accepted tokens alike
          """
          link = (
               db.query(InvitationLink)
               .options(joinedload(InvitationLink.apartment).joinedload(Apartment.owner))
               .filter(InvitationLink.token == token)
               .one_or_none()
          )
          if link is None or link.status != InvitationStatus.PENDING:
               raise InvalidToken()
          return link

     @staticmethod
     def validate_token(db: Session, token: str) -> InvitationLink:
          """Read-only check of a token; returns the pending link with apartment and owner loaded."""
          return InvitationService.get_pending_link(db, token)

     @staticmethod
     def accept_invitation(db: Session, token: str, tenant: User) -> Lease:
          """
          Accept a pending invitation: create the active lease and mark the
          link accepted, in one transaction.

          Args:
               db: SQLAlchemy database session
               token: Invitation token
               tenant: Accepting user (tenant role)

          Returns:
               The new active Lease

          Raises:
               InvalidToken: The link is not pending
               UserHasLease: The tenant already holds an active lease
               ApartmentHasLease: The apartment gained an active lease meanwhile
          """
          link = InvitationService.get_pending_link(db, token)
          link_id = link.id
          apartment_id = link.apartment_id

          if get_active_lease_for_tenant(db, tenant.id) is not None:
               logger.info("Tenant %s tried to accept invitation %s while holding a lease", tenant.id, link_id)
               raise UserHasLease()

          lease = Lease(
               apartment_id=apartment_id,
               tenant_id=tenant.id,
               status=LeaseStatus.ACTIVE,
               start_date=date.today(),
               created_by=tenant.id,
          )
          db.add(lease)
          try:
               db.flush()
          except IntegrityError:
               db.rollback()
               if get_active_lease(db, apartment_id) is not None:
                    logger.info("Invitation %s lost the race: apartment %s already leased", link_id, apartment_id)
                    raise ApartmentHasLease()
               if get_active_lease_for_tenant(db, tenant.id) is not None:
                    raise UserHasLease()
               raise

          accepted = db.execute(
               update(InvitationLink)
               .where(
                    InvitationLink.id == link_id,
                    InvitationLink.status == InvitationStatus.PENDING,
               )
               .values(status=InvitationStatus.ACCEPTED, accepted_by=tenant.id)
               .execution_options(synchronize_session="fetch")
          ).rowcount
          if not accepted:
               # The lease is authoritative; a stale link status is only cosmetic.
               logger.warning("Invitation %s was no longer pending when marked accepted", link_id)

          db.commit()
          db.refresh(lease)

          logger.info("Invitation %s accepted: lease %s for tenant %s", link_id, lease.id, tenant.id)
          return lease
