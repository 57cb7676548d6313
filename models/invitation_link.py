# models/invitation_link.py
import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Index, func, text
from sqlalchemy.orm import relationship

from .base import Base, utcnow, uuid_pk


class InvitationStatus(str, enum.Enum):
     """pending -> accepted | expired. Both targets are terminal."""
     PENDING = "pending"
     ACCEPTED = "accepted"
     EXPIRED = "expired"


_PENDING_ONLY = text("status = 'pending'")


class InvitationLink(Base):
     """
     One-time tenant invitation for an apartment.

     At most one link per apartment may be pending; creating a new link
     expires the previous pending one in the same transaction.
     """
     __tablename__ = "invitation_links"
     __table_args__ = (
          Index(
               "uq_invitation_links_pending_apartment",
               "apartment_id",
               unique=True,
               sqlite_where=_PENDING_ONLY,
               postgresql_where=_PENDING_ONLY,
               mssql_where=_PENDING_ONLY,
          ),
     )

     id = uuid_pk()
     apartment_id = Column(
          String(36),
          ForeignKey("apartments.id", ondelete="CASCADE"),
          nullable=False,
          index=True,
     )
     token = Column(String(64), nullable=False, unique=True, index=True)
     status = Column(
          Enum(
               InvitationStatus,
               name="invitation_status",
               create_constraint=True,
               values_callable=lambda statuses: [s.value for s in statuses],
          ),
          default=InvitationStatus.PENDING,
          nullable=False,
     )
     created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
     accepted_by = Column(String(36), ForeignKey("users.id"), nullable=True)
     created_at = Column(DateTime, default=utcnow, server_default=func.now(), nullable=False)

     # Relationships
     apartment = relationship("Apartment", back_populates="invitation_links")
     accepted_by_user = relationship("User", foreign_keys=[accepted_by])

     def __repr__(self):
          return f"<InvitationLink(id={self.id}, apartment_id={self.apartment_id}, status='{self.status.value}')>"
