# models/charge.py
import enum

from sqlalchemy import Column, String, Numeric, Date, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, uuid_pk


class ChargeType(str, enum.Enum):
     """Kind of recurring or one-off charge."""
     RENT = "rent"
     BILL = "bill"
     OTHER = "other"


class PaymentStatus(str, enum.Enum):
     """Derived from payments on every read; never stored."""
     UNPAID = "unpaid"
     PARTIALLY_PAID = "partially_paid"
     PAID = "paid"


class Charge(TimestampMixin, Base):
     """
     Charge model - an amount owed by the tenant of a lease.

     Payment status is never stored here; it is derived from the payments
     on every read (see services.charge_status).
     """
     __tablename__ = "charges"
     __table_args__ = (
          CheckConstraint("amount > 0", name="ck_charges_amount_positive"),
     )

     id = uuid_pk()
     lease_id = Column(
          String(36),
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True,
     )
     amount = Column(Numeric(12, 2), nullable=False)
     due_date = Column(Date, nullable=False, index=True)
     type = Column(
          Enum(
               ChargeType,
               name="charge_type",
               create_constraint=True,
               values_callable=lambda types: [t.value for t in types],
          ),
          nullable=False,
     )
     comment = Column(String(300), nullable=True)
     attachment_path = Column(String(500), nullable=True)
     created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

     # Relationships
     lease = relationship("Lease", back_populates="charges")
     payments = relationship(
          "Payment",
          back_populates="charge",
          cascade="all, delete-orphan",
          passive_deletes=True,
          order_by="Payment.payment_date.desc()",
     )

     def __repr__(self):
          return f"<Charge(id={self.id}, amount={self.amount}, due_date={self.due_date}, type='{self.type.value}')>"
