# services/lease_service.py
"""
Lease lifecycle.

The "current lease" of an apartment or tenant is a query, never a stored
pointer: at most one row can match thanks to the filtered unique indexes on
leases. Leases are created only by accepting an invitation
(services.invitation_service); this module reads them and archives them.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from errors import NoActiveLease
from models import Lease, LeaseStatus, User
from models.base import utcnow
from services.access import get_owned_apartment

logger = logging.getLogger(__name__)


def get_active_lease(db: Session, apartment_id: str) -> Optional[Lease]:
     """Return the active lease of an apartment, if any."""
     return (
          db.query(Lease)
          .filter(Lease.apartment_id == apartment_id, Lease.status == LeaseStatus.ACTIVE)
          .one_or_none()
     )


def get_active_lease_for_tenant(db: Session, tenant_id: str) -> Optional[Lease]:
     """Return the tenant's active lease, if any."""
     return (
          db.query(Lease)
          .filter(Lease.tenant_id == tenant_id, Lease.status == LeaseStatus.ACTIVE)
          .one_or_none()
     )


def archive_lease(db: Session, apartment_id: str, owner: User) -> Lease:
     """
     End the active lease of an apartment (active -> archived).

     Frees both the apartment and the tenant for a new lease. Archived is
     terminal.

     Args:
          db: SQLAlchemy database session
          apartment_id: Apartment whose active lease is archived
          owner: Caller; must own the apartment

     Returns:
          The archived Lease

     Raises:
          ApartmentNotFound, Forbidden: Ownership check failed
          NoActiveLease: The apartment has no active lease
     """
     get_owned_apartment(db, apartment_id, owner)

     lease = get_active_lease(db, apartment_id)
     if lease is None:
          logger.info("Archive rejected: apartment %s has no active lease", apartment_id)
          raise NoActiveLease()

     lease.status = LeaseStatus.ARCHIVED
     lease.archived_at = utcnow()
     db.commit()
     db.refresh(lease)

     logger.info("Lease %s archived by owner %s", lease.id, owner.id)
     return lease


def list_leases(db: Session, apartment_id: str, owner: User) -> List[Lease]:
     """Lease history of an apartment, newest first, with tenants loaded."""
     get_owned_apartment(db, apartment_id, owner)
     return (
          db.query(Lease)
          .options(joinedload(Lease.tenant))
          .filter(Lease.apartment_id == apartment_id)
          .order_by(Lease.created_at.desc(), Lease.id.desc())
          .all()
     )
