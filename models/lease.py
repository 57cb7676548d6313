# models/lease.py
import enum

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Enum, Index, text
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, uuid_pk


class LeaseStatus(str, enum.Enum):
     """Lease lifecycle: active -> archived (terminal)."""
     ACTIVE = "active"
     ARCHIVED = "archived"


_ACTIVE_ONLY = text("status = 'active'")


class Lease(TimestampMixin, Base):
     """
     Lease model - tenancy binding one tenant to one apartment.

     Created only by accepting an invitation. The filtered unique indexes
     allow at most one active lease per apartment and per tenant; archived
     leases are unconstrained history.
     """
     __tablename__ = "leases"
     __table_args__ = (
          Index(
               "uq_leases_active_apartment",
               "apartment_id",
               unique=True,
               sqlite_where=_ACTIVE_ONLY,
               postgresql_where=_ACTIVE_ONLY,
               mssql_where=_ACTIVE_ONLY,
          ),
          Index(
               "uq_leases_active_tenant",
               "tenant_id",
               unique=True,
               sqlite_where=_ACTIVE_ONLY,
               postgresql_where=_ACTIVE_ONLY,
               mssql_where=_ACTIVE_ONLY,
          ),
     )

     id = uuid_pk()
     apartment_id = Column(
          String(36),
          ForeignKey("apartments.id", ondelete="NO ACTION"),
          nullable=False,
          index=True,
     )
     tenant_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
     status = Column(
          Enum(
               LeaseStatus,
               name="lease_status",
               create_constraint=True,
               values_callable=lambda statuses: [s.value for s in statuses],
          ),
          default=LeaseStatus.ACTIVE,
          nullable=False,
     )
     start_date = Column(Date, nullable=False)
     archived_at = Column(DateTime, nullable=True)
     created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

     # Relationships
     apartment = relationship("Apartment", back_populates="leases")
     tenant = relationship("User", back_populates="leases", foreign_keys=[tenant_id])
     charges = relationship("Charge", back_populates="lease", passive_deletes=True)

     @property
     def is_active(self) -> bool:
          return self.status == LeaseStatus.ACTIVE

     def __repr__(self):
          return f"<Lease(id={self.id}, apartment_id={self.apartment_id}, tenant_id={self.tenant_id}, status='{self.status.value}')>"
