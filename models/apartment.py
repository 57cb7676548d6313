# models/apartment.py
from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, uuid_pk


class Apartment(TimestampMixin, Base):
     """
     Apartment model - a rentable unit exclusively owned by one owner.

     Deleting an apartment that still has leases is rejected by the
     leases.apartment_id foreign key (ON DELETE NO ACTION).
     """
     __tablename__ = "apartments"

     id = uuid_pk()
     name = Column(String(100), nullable=False)
     address = Column(String(200), nullable=False)
     owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
     created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

     # Relationships
     owner = relationship("User", back_populates="apartments", foreign_keys=[owner_id])
     leases = relationship(
          "Lease",
          back_populates="apartment",
          passive_deletes="all",
          order_by="Lease.created_at.desc()",
     )
     invitation_links = relationship(
          "InvitationLink",
          back_populates="apartment",
          passive_deletes=True,
     )

     def __repr__(self):
          return f"<Apartment(id={self.id}, name='{self.name}')>"
