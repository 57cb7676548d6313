# services/payment_service.py
"""
Payment Service - append-only payments against a charge.

The running total of a charge's payments may never exceed its amount. The
check runs while the charge row is locked, so two concurrent payments on
the same charge cannot both pass it.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from errors import PaymentExceedsCharge
from models import Charge, Payment, User
from services.access import get_owned_charge, get_visible_charge
from services.charge_status import ZERO

logger = logging.getLogger(__name__)


def record_payment(db: Session, charge_id: str, owner: User, amount: Decimal, payment_date: date) -> Payment:
     """
     Record money received against a charge.

     Args:
          db: SQLAlchemy database session
          charge_id: Charge being paid
          owner: Caller; must own the charge's apartment
          amount: Positive amount received
          payment_date: Date the money was received

     Returns:
          The new Payment

     Raises:
          ChargeNotFound: Not one of the caller's charges
          PaymentExceedsCharge: The payment would overpay the charge; nothing is written
     """
     get_owned_charge(db, charge_id, owner)

     # Re-read the charge under a row lock before summing its payments.
     charge = (
          db.query(Charge)
          .filter(Charge.id == charge_id)
          .with_for_update()
          .populate_existing()
          .one()
     )
     paid_rows = db.query(Payment.amount).filter(Payment.charge_id == charge_id).all()
     total_paid = sum((Decimal(row.amount) for row in paid_rows), ZERO)

     if total_paid + amount > charge.amount:
          logger.info(
               "Payment rejected on charge %s: %s + %s exceeds %s",
               charge_id,
               total_paid,
               amount,
               charge.amount,
          )
          raise PaymentExceedsCharge(
               details={
                    "charge_amount": float(charge.amount),
                    "total_paid": float(total_paid),
                    "remaining_amount": float(charge.amount - total_paid),
               }
          )

     payment = Payment(
          charge_id=charge_id,
          amount=amount,
          payment_date=payment_date,
          created_by=owner.id,
     )
     db.add(payment)
     db.commit()
     db.refresh(payment)

     logger.info("Payment %s of %s recorded on charge %s", payment.id, amount, charge_id)
     return payment


def list_payments(db: Session, charge_id: str, user: User) -> List[Payment]:
     """Payments of a visible charge, newest payment_date first."""
     get_visible_charge(db, charge_id, user)
     return (
          db.query(Payment)
          .filter(Payment.charge_id == charge_id)
          .order_by(Payment.payment_date.desc(), Payment.created_at.desc())
          .all()
     )
