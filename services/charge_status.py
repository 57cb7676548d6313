# services/charge_status.py
"""
Payment-status derivation for charges.

The status of a charge is a pure function of its amount, its payments and
the current date. It is recomputed on every read and never stored, so it
cannot drift from the payments table.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from models.charge import PaymentStatus

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class ChargeStatus:
     payment_status: PaymentStatus
     total_paid: Decimal
     remaining_amount: Decimal
     is_overdue: bool

     @property
     def is_paid(self) -> bool:
          return self.payment_status == PaymentStatus.PAID


def derive_charge_status(
     amount: Decimal,
     payment_amounts: Iterable[Decimal],
     due_date: date,
     today: Optional[date] = None,
) -> ChargeStatus:
     """
     Derive the payment status of a single charge.

     Args:
          amount: Charge amount (positive)
          payment_amounts: Amounts of every payment recorded against the charge
          due_date: Charge due date
          today: Reference date for the overdue flag (defaults to date.today())

     Returns:
          ChargeStatus with payment_status, total_paid, remaining_amount, is_overdue
     """
     if today is None:
          today = date.today()

     amount = Decimal(amount)
     total_paid = sum((Decimal(p) for p in payment_amounts), ZERO)
     # Payments never exceed the amount; clamp only guards against a store that lets one through.
     remaining = max(amount - total_paid, ZERO)

     if total_paid >= amount:
          payment_status = PaymentStatus.PAID
     elif total_paid > ZERO:
          payment_status = PaymentStatus.PARTIALLY_PAID
     else:
          payment_status = PaymentStatus.UNPAID

     is_overdue = payment_status != PaymentStatus.PAID and due_date < today

     return ChargeStatus(
          payment_status=payment_status,
          total_paid=total_paid,
          remaining_amount=remaining,
          is_overdue=is_overdue,
     )


def status_for_charge(charge, today: Optional[date] = None) -> ChargeStatus:
     """Derive the status of a Charge ORM object from its loaded payments."""
     return derive_charge_status(
          charge.amount,
          (payment.amount for payment in charge.payments),
          charge.due_date,
          today=today,
     )
