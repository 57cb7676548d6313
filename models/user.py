# models/user.py
import enum

from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, uuid_pk


class UserRole(str, enum.Enum):
     """Role fixed at signup by the identity provider."""
     OWNER = "owner"
     TENANT = "tenant"


class User(TimestampMixin, Base):
     """
     User model - profile row created by the identity provider at signup.

     The id is the identity provider's principal id. Only full_name is
     mutable from this application.
     """
     __tablename__ = "users"

     id = uuid_pk()
     full_name = Column(String(100), nullable=False)
     email = Column(String(255), unique=True, nullable=False, index=True)
     role = Column(
          Enum(
               UserRole,
               name="user_role",
               create_constraint=True,
               values_callable=lambda roles: [r.value for r in roles],
          ),
          nullable=False,
     )

     # Relationships
     apartments = relationship(
          "Apartment",
          back_populates="owner",
          foreign_keys="Apartment.owner_id",
     )
     leases = relationship("Lease", back_populates="tenant", foreign_keys="Lease.tenant_id")

     @property
     def is_owner(self) -> bool:
          return self.role == UserRole.OWNER

     @property
     def is_tenant(self) -> bool:
          return self.role == UserRole.TENANT

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
