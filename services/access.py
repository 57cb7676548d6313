# services/access.py
"""
Authorization checks shared by the services.

Every rule is an explicit lookup followed by a comparison against the
caller's id. Reads answer "not found" for rows the caller may not see, so
existence is never leaked; owner mutations on someone else's apartment
answer Forbidden.
"""
from sqlalchemy.orm import Session

from errors import ApartmentNotFound, ChargeNotFound, Forbidden
from models import Apartment, Charge, Lease, LeaseStatus, User


def get_owned_apartment(db: Session, apartment_id: str, user: User) -> Apartment:
     """
     Load an apartment the caller must own.

     Raises:
          ApartmentNotFound: If no such apartment exists
          Forbidden: If it belongs to another owner
     """
     apartment = db.get(Apartment, apartment_id)
     if apartment is None:
          raise ApartmentNotFound()
     if apartment.owner_id != user.id:
          raise Forbidden("You do not own this apartment")
     return apartment


def get_visible_apartment(db: Session, apartment_id: str, user: User) -> Apartment:
     """
     Load an apartment visible to the caller: its owner, or the tenant
     holding the active lease on it.

     Raises:
          ApartmentNotFound: If it does not exist or is not visible
     """
     apartment = db.get(Apartment, apartment_id)
     if apartment is None:
          raise ApartmentNotFound()
     if apartment.owner_id == user.id:
          return apartment

     has_lease = (
          db.query(Lease.id)
          .filter(
               Lease.apartment_id == apartment_id,
               Lease.tenant_id == user.id,
               Lease.status == LeaseStatus.ACTIVE,
          )
          .first()
     )
     if has_lease is None:
          raise ApartmentNotFound()
     return apartment


def get_lease_party_apartment(db: Session, apartment_id: str, user: User) -> Apartment:
     """
     Load an apartment whose owner the caller is, or on which the caller
     holds or held a lease (any status).

     Raises:
          ApartmentNotFound: If it does not exist or the caller is no party to it
     """
     apartment = db.get(Apartment, apartment_id)
     if apartment is None:
          raise ApartmentNotFound()
     if apartment.owner_id == user.id:
          return apartment

     any_lease = (
          db.query(Lease.id)
          .filter(Lease.apartment_id == apartment_id, Lease.tenant_id == user.id)
          .first()
     )
     if any_lease is None:
          raise ApartmentNotFound()
     return apartment


def can_view_lease(user: User, lease: Lease) -> bool:
     """Owner of the leased apartment, or the tenant of that lease (active or archived)."""
     return lease.apartment.owner_id == user.id or lease.tenant_id == user.id


def get_visible_charge(db: Session, charge_id: str, user: User) -> Charge:
     """
     Raises:
          ChargeNotFound: If the charge does not exist or is not visible
     """
     charge = db.get(Charge, charge_id)
     if charge is None or not can_view_lease(user, charge.lease):
          raise ChargeNotFound()
     return charge


def get_owned_charge(db: Session, charge_id: str, user: User) -> Charge:
     """
     Load a charge on one of the caller's apartments.

     Raises:
          ChargeNotFound: If it does not exist or belongs to another owner
     """
     charge = db.get(Charge, charge_id)
     if charge is None or charge.lease.apartment.owner_id != user.id:
          raise ChargeNotFound()
     return charge
