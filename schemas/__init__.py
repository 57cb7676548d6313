# schemas/__init__.py
from .user import UserProfileResponse, UserProfileUpdate
from .apartment import (
     ApartmentCreate,
     ApartmentUpdate,
     ApartmentResponse,
     ApartmentWithLease,
     ApartmentWithOwner,
     OwnerApartmentList,
     TenantApartmentList,
     ApartmentSummaryResponse,
)
from .invitation import (
     InvitationCreateResponse,
     InvitationListResponse,
     ValidateInvitationResponse,
     AcceptInvitationResponse,
)
from .lease import LeaseResponse, LeaseListResponse
from .charge import (
     ChargeCreate,
     ChargeUpdate,
     ChargeResponse,
     ChargeDetailsResponse,
     ChargesByMonthResponse,
     AttachmentResponse,
)
from .payment import PaymentCreate, PaymentResponse, PaymentListResponse
from .dashboard import FinancialSummary, OwnerDashboardResponse, TenantDashboardResponse

__all__ = [
     "UserProfileResponse",
     "UserProfileUpdate",
     "ApartmentCreate",
     "ApartmentUpdate",
     "ApartmentResponse",
     "ApartmentWithLease",
     "ApartmentWithOwner",
     "OwnerApartmentList",
     "TenantApartmentList",
     "ApartmentSummaryResponse",
     "InvitationCreateResponse",
     "InvitationListResponse",
     "ValidateInvitationResponse",
     "AcceptInvitationResponse",
     "LeaseResponse",
     "LeaseListResponse",
     "ChargeCreate",
     "ChargeUpdate",
     "ChargeResponse",
     "ChargeDetailsResponse",
     "ChargesByMonthResponse",
     "AttachmentResponse",
     "PaymentCreate",
     "PaymentResponse",
     "PaymentListResponse",
     "FinancialSummary",
     "OwnerDashboardResponse",
     "TenantDashboardResponse",
]
