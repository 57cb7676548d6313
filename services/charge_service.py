# services/charge_service.py
"""
Charge Service - create, list, edit and delete charges.

Edit and delete are gated on the derived payment status: a fully paid
charge is immutable, and an amount can never drop below what has already
been paid.
"""
import logging
from calendar import monthrange
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from azure_blob import BlobStorage
from errors import (
     AmountTooLow,
     ApartmentNotFound,
     CannotDeletePaidCharge,
     ChargeFullyPaid,
     LeaseNotFound,
     NoActiveLease,
     StorageError,
)
from models import Charge, Lease, PaymentStatus, User
from schemas.charge import ChargeCreate, ChargeResponse
from services.access import (
     can_view_lease,
     get_lease_party_apartment,
     get_owned_apartment,
     get_owned_charge,
     get_visible_charge,
)
from services.charge_status import ChargeStatus, status_for_charge
from services.lease_service import get_active_lease

logger = logging.getLogger(__name__)


def month_key(day: date) -> str:
     """Grouping key "YYYY-MM" of a due date."""
     return f"{day.year:04d}-{day.month:02d}"


def month_bounds(month: str) -> Tuple[date, date]:
     """First and last day of a "YYYY-MM" month."""
     year, month_num = (int(part) for part in month.split("-"))
     return date(year, month_num, 1), date(year, month_num, monthrange(year, month_num)[1])


def attachment_url(storage: BlobStorage, path: Optional[str]) -> Optional[str]:
     """Signed download URL for a bound attachment; None when signing fails."""
     if not path:
          return None
     try:
          return storage.download_url(path)
     except StorageError:
          logger.warning("Could not sign download URL for %s", path, exc_info=True)
          return None


def to_charge_response(
     charge: Charge,
     storage: BlobStorage,
     status: Optional[ChargeStatus] = None,
     today: Optional[date] = None,
) -> ChargeResponse:
     """Build the API view of a charge with its derived status."""
     if status is None:
          status = status_for_charge(charge, today)
     return ChargeResponse(
          id=charge.id,
          lease_id=charge.lease_id,
          amount=charge.amount,
          due_date=charge.due_date,
          type=charge.type,
          comment=charge.comment,
          attachment_path=charge.attachment_path,
          attachment_url=attachment_url(storage, charge.attachment_path),
          payment_status=status.payment_status,
          total_paid=status.total_paid,
          remaining_amount=status.remaining_amount,
          is_overdue=status.is_overdue,
          created_by=charge.created_by,
          created_at=charge.created_at,
          updated_at=charge.updated_at,
     )


def load_lease_charges(db: Session, lease_id: str) -> List[Charge]:
     """Charges of a lease with payments loaded, due_date desc then created_at desc then id."""
     return (
          db.query(Charge)
          .options(selectinload(Charge.payments))
          .filter(Charge.lease_id == lease_id)
          .order_by(Charge.due_date.desc(), Charge.created_at.desc(), Charge.id.asc())
          .all()
     )


class ChargeService:
     """Service class for the charge lifecycle."""

     @staticmethod
     def create_charge(db: Session, apartment_id: str, owner: User, data: ChargeCreate) -> Charge:
          """
          Create a charge on the apartment's active lease.

          Raises:
               ApartmentNotFound, Forbidden: Ownership check failed
               NoActiveLease: The apartment has no tenant to bill
          """
          get_owned_apartment(db, apartment_id, owner)

          lease = get_active_lease(db, apartment_id)
          if lease is None:
               logger.info("Charge rejected: apartment %s has no active lease", apartment_id)
               raise NoActiveLease()

          charge = Charge(
               lease_id=lease.id,
               amount=data.amount,
               due_date=data.due_date,
               type=data.type,
               comment=data.comment,
               created_by=owner.id,
          )
          db.add(charge)
          db.commit()
          db.refresh(charge)

          logger.info("Charge %s (%s %s) created on lease %s", charge.id, charge.type.value, charge.amount, lease.id)
          return charge

     @staticmethod
     def resolve_lease(db: Session, apartment_id: str, user: User, lease_id: Optional[str] = None) -> Lease:
          """
          Lease whose charges the caller asked for: the explicit lease_id
          (historical leases included) or the apartment's active lease.

          Raises:
               ApartmentNotFound: Unknown apartment, caller is neither its owner nor one
                    of its tenants, or caller may not see the requested lease
               LeaseNotFound: lease_id does not belong to the apartment
               NoActiveLease: No lease_id given and the apartment has no active lease
          """
          apartment = get_lease_party_apartment(db, apartment_id, user)

          if lease_id is not None:
               lease = db.get(Lease, lease_id)
               if lease is None or lease.apartment_id != apartment_id:
                    raise LeaseNotFound()
          else:
               lease = get_active_lease(db, apartment_id)
               if lease is None:
                    if apartment.owner_id != user.id:
                         raise ApartmentNotFound()
                    raise NoActiveLease()

          if not can_view_lease(user, lease):
               raise ApartmentNotFound()
          return lease

     @staticmethod
     def get_charges(
          db: Session,
          apartment_id: str,
          user: User,
          storage: BlobStorage,
          lease_id: Optional[str] = None,
          month: Optional[str] = None,
          status: Optional[PaymentStatus] = None,
          overdue: Optional[bool] = None,
          today: Optional[date] = None,
     ) -> Tuple[Lease, Dict[str, List[ChargeResponse]]]:
          """
          Charges of one lease grouped by due month, newest month first.

          Args:
               db: SQLAlchemy database session
               apartment_id: Apartment whose charges are listed
               user: Caller (owner of the apartment, or tenant of the lease)
               storage: Attachment store used to sign download URLs
               lease_id: Explicit lease (e.g. an archived one); defaults to the active lease
               month: "YYYY-MM" filter on due_date
               status: Filter on derived payment status
               overdue: Filter on the derived overdue flag (None = no filter)
               today: Reference date for derivation

          Returns:
               (resolved Lease, {"YYYY-MM": [ChargeResponse, ...]})
          """
          lease = ChargeService.resolve_lease(db, apartment_id, user, lease_id)

          query = (
               db.query(Charge)
               .options(selectinload(Charge.payments))
               .filter(Charge.lease_id == lease.id)
          )
          if month:
               first_day, last_day = month_bounds(month)
               query = query.filter(Charge.due_date >= first_day, Charge.due_date <= last_day)
          charges = query.order_by(Charge.due_date.desc(), Charge.created_at.desc(), Charge.id.asc()).all()

          grouped: Dict[str, List[ChargeResponse]] = {}
          for charge in charges:
               charge_status = status_for_charge(charge, today)
               if status is not None and charge_status.payment_status != status:
                    continue
               if overdue is not None and charge_status.is_overdue != overdue:
                    continue
               grouped.setdefault(month_key(charge.due_date), []).append(
                    to_charge_response(charge, storage, charge_status)
               )
          return lease, grouped

     @staticmethod
     def get_charge(db: Session, charge_id: str, user: User) -> Charge:
          """Charge visible to the caller. Raises ChargeNotFound otherwise."""
          return get_visible_charge(db, charge_id, user)

     @staticmethod
     def update_charge(db: Session, charge_id: str, owner: User, changes: dict) -> Charge:
          """
          Apply a partial update.

          Raises:
               ChargeNotFound: Not one of the caller's charges
               ChargeFullyPaid: The charge is already paid
               AmountTooLow: The new amount is below the total paid so far
          """
          charge = get_owned_charge(db, charge_id, owner)
          current = status_for_charge(charge)

          if current.is_paid:
               logger.info("Update rejected: charge %s is fully paid", charge_id)
               raise ChargeFullyPaid()

          new_amount = changes.get("amount")
          if new_amount is not None and new_amount < current.total_paid:
               logger.info(
                    "Update rejected: charge %s amount %s below paid %s",
                    charge_id,
                    new_amount,
                    current.total_paid,
               )
               raise AmountTooLow(
                    details={"total_paid": float(current.total_paid), "requested_amount": float(new_amount)}
               )

          for field, value in changes.items():
               setattr(charge, field, value)
          db.commit()
          db.refresh(charge)

          logger.info("Charge %s updated (%s)", charge.id, ", ".join(sorted(changes)))
          return charge

     @staticmethod
     def delete_charge(db: Session, charge_id: str, owner: User, storage: BlobStorage) -> None:
          """
          Delete a charge and, by cascade, its payments.

          The bound attachment is removed first; failing to remove it does not
          block the delete.

          Raises:
               ChargeNotFound: Not one of the caller's charges
               CannotDeletePaidCharge: The charge is fully paid
          """
          charge = get_owned_charge(db, charge_id, owner)
          if status_for_charge(charge).is_paid:
               logger.info("Delete rejected: charge %s is fully paid", charge_id)
               raise CannotDeletePaidCharge()

          if charge.attachment_path:
               try:
                    storage.delete(charge.attachment_path)
               except StorageError:
                    logger.warning("Could not delete attachment %s of charge %s", charge.attachment_path, charge_id, exc_info=True)

          db.delete(charge)
          db.commit()

          logger.info("Charge %s deleted by owner %s", charge_id, owner.id)
