# models/payment.py
"""
Payment model - append-only record of money received against a charge.

The sum of payments for a charge may never exceed the charge amount;
services.payment_service checks this under a row lock before inserting.
"""
from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship

from .base import Base, utcnow, uuid_pk


class Payment(Base):
     __tablename__ = "payments"
     __table_args__ = (
          CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
     )

     id = uuid_pk()
     charge_id = Column(
          String(36),
          ForeignKey("charges.id", ondelete="CASCADE"),
          nullable=False,
          index=True,
     )
     amount = Column(Numeric(12, 2), nullable=False)
     payment_date = Column(Date, nullable=False)
     created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
     created_at = Column(DateTime, default=utcnow, server_default=func.now(), nullable=False)

     # Relationships
     charge = relationship("Charge", back_populates="payments")

     def __repr__(self):
          return f"<Payment(id={self.id}, charge_id={self.charge_id}, amount={self.amount})>"
