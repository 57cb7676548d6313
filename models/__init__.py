# models/__init__.py
from .base import Base
from .user import User, UserRole
from .apartment import Apartment
from .lease import Lease, LeaseStatus
from .invitation_link import InvitationLink, InvitationStatus
from .charge import Charge, ChargeType, PaymentStatus
from .payment import Payment

__all__ = [
     "Base",
     "User",
     "UserRole",
     "Apartment",
     "Lease",
     "LeaseStatus",
     "InvitationLink",
     "InvitationStatus",
     "Charge",
     "ChargeType",
     "PaymentStatus",
     "Payment",
]
