# services/apartment_service.py
"""
Apartment Service - CRUD for apartments and the role-specific listings.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from errors import ApartmentHasLeases
from models import Apartment, Lease, User
from services.access import get_owned_apartment, get_visible_apartment
from services.lease_service import get_active_lease_for_tenant

logger = logging.getLogger(__name__)


class ApartmentService:
     """Service class for apartment operations."""

     @staticmethod
     def create_apartment(db: Session, owner: User, name: str, address: str) -> Apartment:
          apartment = Apartment(
               name=name,
               address=address,
               owner_id=owner.id,
               created_by=owner.id,
          )
          db.add(apartment)
          db.commit()
          db.refresh(apartment)

          logger.info("Apartment %s created by owner %s", apartment.id, owner.id)
          return apartment

     @staticmethod
     def list_owner_apartments(
          db: Session,
          owner: User,
          include_archived: bool = False,
     ) -> List[Tuple[Apartment, Optional[Lease]]]:
          """
          All apartments of an owner, newest first, each paired with its lease.

          The lease is the active one; with include_archived, an apartment
          without an active lease is paired with its most recent archived lease.
          """
          apartments = (
               db.query(Apartment)
               .options(selectinload(Apartment.leases).selectinload(Lease.tenant))
               .filter(Apartment.owner_id == owner.id)
               .order_by(Apartment.created_at.desc(), Apartment.id.desc())
               .all()
          )

          result = []
          for apartment in apartments:
               lease = next((l for l in apartment.leases if l.is_active), None)
               if lease is None and include_archived and apartment.leases:
                    lease = apartment.leases[0]
               result.append((apartment, lease))
          return result

     @staticmethod
     def list_tenant_apartments(db: Session, tenant: User) -> List[Apartment]:
          """The single apartment the tenant currently leases, or an empty list."""
          lease = get_active_lease_for_tenant(db, tenant.id)
          if lease is None:
               return []
          return [lease.apartment]

     @staticmethod
     def get_apartment(db: Session, apartment_id: str, user: User) -> Tuple[Apartment, Optional[Lease]]:
          """Apartment visible to the caller, with its active lease."""
          apartment = get_visible_apartment(db, apartment_id, user)
          lease = next((l for l in apartment.leases if l.is_active), None)
          return apartment, lease

     @staticmethod
     def update_apartment(db: Session, apartment_id: str, owner: User, changes: dict) -> Apartment:
          apartment = get_owned_apartment(db, apartment_id, owner)
          for field, value in changes.items():
               if value is not None:
                    setattr(apartment, field, value)
          db.commit()
          db.refresh(apartment)

          logger.info("Apartment %s updated (%s)", apartment.id, ", ".join(sorted(changes)))
          return apartment

     @staticmethod
     def delete_apartment(db: Session, apartment_id: str, owner: User) -> None:
          """
          Delete an apartment.

          Leases reference apartments with ON DELETE NO ACTION, so the store
          rejects deleting an apartment with any lease history. Invitation
          links are removed by cascade.

          Raises:
               ApartmentNotFound, Forbidden: Ownership check failed
               ApartmentHasLeases: The apartment has leases
          """
          get_owned_apartment(db, apartment_id, owner)
          try:
               db.query(Apartment).filter(Apartment.id == apartment_id).delete(synchronize_session=False)
               db.commit()
          except IntegrityError as exc:
               db.rollback()
               logger.info("Delete rejected: apartment %s has leases", apartment_id)
               raise ApartmentHasLeases() from exc

          logger.info("Apartment %s deleted by owner %s", apartment_id, owner.id)
