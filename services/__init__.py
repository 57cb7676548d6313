# services/__init__.py
from .charge_status import ChargeStatus, derive_charge_status, status_for_charge
from .user_service import UserService
from .apartment_service import ApartmentService
from .invitation_service import InvitationService, build_invitation_url, generate_token
from .lease_service import (
     archive_lease,
     get_active_lease,
     get_active_lease_for_tenant,
     list_leases,
)
from .charge_service import ChargeService, to_charge_response
from .payment_service import list_payments, record_payment
from .attachment_service import remove_attachment, set_attachment
from .dashboard_service import (
     get_apartment_summary,
     get_owner_dashboard,
     get_tenant_dashboard,
     summarize_charges,
)

__all__ = [
     "ChargeStatus",
     "derive_charge_status",
     "status_for_charge",
     "UserService",
     "ApartmentService",
     "InvitationService",
     "build_invitation_url",
     "generate_token",
     "archive_lease",
     "get_active_lease",
     "get_active_lease_for_tenant",
     "list_leases",
     "ChargeService",
     "to_charge_response",
     "list_payments",
     "record_payment",
     "remove_attachment",
     "set_attachment",
     "get_apartment_summary",
     "get_owner_dashboard",
     "get_tenant_dashboard",
     "summarize_charges",
]
