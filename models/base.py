# models/base.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.orm import DeclarativeBase


def generate_uuid() -> str:
     """Primary keys are UUID strings, matching the identity provider's user ids."""
     return str(uuid.uuid4())


def utcnow() -> datetime:
     """Naive UTC timestamp with microseconds, as stored in DateTime columns."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
     """Base class for all SQLAlchemy models; every model names its own table."""


class TimestampMixin:
     """created_at / updated_at columns shared by mutable tables."""

     created_at = Column(DateTime, default=utcnow, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)


def uuid_pk() -> Column:
     return Column(String(36), primary_key=True, default=generate_uuid)
