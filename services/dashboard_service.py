# services/dashboard_service.py
"""
Financial aggregation over derived charge statuses.

Nothing here is stored: every total is recomputed from charges and
payments on each request.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from errors import NoActiveLease
from models import Apartment, Charge, Lease, PaymentStatus, User
from schemas.apartment import ApartmentSummaryResponse, SummaryApartment, SummaryLease, SummaryTenant
from schemas.dashboard import (
     ApartmentTotals,
     DashboardOwner,
     FinancialSummary,
     OwnerDashboardApartment,
     OwnerDashboardResponse,
     OwnerDashboardStatistics,
     TenantDashboardApartment,
     TenantDashboardResponse,
     TenantFinancialSummary,
     TenantName,
     UpcomingCharge,
)
from services.access import get_owned_apartment
from services.charge_service import load_lease_charges
from services.charge_status import ZERO, status_for_charge
from services.lease_service import get_active_lease, get_active_lease_for_tenant

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 5


@dataclass
class LeaseTotals:
     total_unpaid: Decimal = ZERO
     total_partially_paid: Decimal = ZERO
     total_overdue: Decimal = ZERO
     upcoming: List[UpcomingCharge] = field(default_factory=list)

     @property
     def upcoming_count(self) -> int:
          return len(self.upcoming)

     def upcoming_preview(self, limit: int = UPCOMING_LIMIT) -> List[UpcomingCharge]:
          return self.upcoming[:limit]


def summarize_charges(charges: Iterable[Charge], today: Optional[date] = None) -> LeaseTotals:
     """
     Totals over the charges of one lease.

     total_unpaid sums what remains on unpaid and partially paid charges;
     total_partially_paid is the partially paid part of that; total_overdue
     sums what remains on overdue charges. Upcoming charges are the unpaid
     ones due today or later, soonest first.
     """
     if today is None:
          today = date.today()

     totals = LeaseTotals()
     upcoming = []
     for charge in charges:
          status = status_for_charge(charge, today)
          if status.payment_status != PaymentStatus.PAID:
               totals.total_unpaid += status.remaining_amount
          if status.payment_status == PaymentStatus.PARTIALLY_PAID:
               totals.total_partially_paid += status.remaining_amount
          if status.is_overdue:
               totals.total_overdue += status.remaining_amount
          if not status.is_paid and charge.due_date >= today:
               upcoming.append((charge, status))

     upcoming.sort(key=lambda item: (item[0].due_date, item[0].created_at, item[0].id))
     totals.upcoming = [
          UpcomingCharge(
               id=charge.id,
               amount=charge.amount,
               remaining_amount=status.remaining_amount,
               due_date=charge.due_date,
               type=charge.type,
          )
          for charge, status in upcoming
     ]
     return totals


def lease_totals(db: Session, lease: Optional[Lease], today: Optional[date] = None) -> LeaseTotals:
     if lease is None:
          return LeaseTotals()
     return summarize_charges(load_lease_charges(db, lease.id), today)


def to_financial_summary(totals: LeaseTotals) -> FinancialSummary:
     return FinancialSummary(
          total_unpaid=totals.total_unpaid,
          total_partially_paid=totals.total_partially_paid,
          total_overdue=totals.total_overdue,
          upcoming_charges_count=totals.upcoming_count,
          upcoming_charges=totals.upcoming_preview(),
     )


def get_apartment_summary(
     db: Session,
     apartment_id: str,
     owner: User,
     today: Optional[date] = None,
) -> ApartmentSummaryResponse:
     """Financial overview of one apartment's active lease (zeros when vacant)."""
     apartment = get_owned_apartment(db, apartment_id, owner)
     lease = get_active_lease(db, apartment_id)
     totals = lease_totals(db, lease, today)

     summary_lease = None
     if lease is not None:
          summary_lease = SummaryLease(
               id=lease.id,
               status=lease.status,
               start_date=lease.start_date,
               tenant=SummaryTenant(full_name=lease.tenant.full_name),
          )

     return ApartmentSummaryResponse(
          apartment=SummaryApartment(id=apartment.id, name=apartment.name, address=apartment.address),
          lease=summary_lease,
          financial_summary=to_financial_summary(totals),
     )


def get_owner_dashboard(db: Session, owner: User, today: Optional[date] = None) -> OwnerDashboardResponse:
     """
     Portfolio view: per-apartment totals of the active lease plus overall statistics.

     Args:
          db: SQLAlchemy database session
          owner: Caller (owner role)
          today: Reference date for derivation

     Returns:
          OwnerDashboardResponse
     """
     apartments = (
          db.query(Apartment)
          .options(selectinload(Apartment.leases).selectinload(Lease.tenant))
          .filter(Apartment.owner_id == owner.id)
          .order_by(Apartment.created_at.desc(), Apartment.id.desc())
          .all()
     )

     items = []
     active_leases = 0
     total_unpaid = ZERO
     total_overdue = ZERO
     for apartment in apartments:
          active = next((lease for lease in apartment.leases if lease.is_active), None)
          latest = active or (apartment.leases[0] if apartment.leases else None)
          totals = lease_totals(db, active, today)

          if active is not None:
               active_leases += 1
          total_unpaid += totals.total_unpaid
          total_overdue += totals.total_overdue

          items.append(
               OwnerDashboardApartment(
                    id=apartment.id,
                    name=apartment.name,
                    address=apartment.address,
                    lease_status=latest.status if latest else None,
                    tenant=TenantName(full_name=active.tenant.full_name) if active else None,
                    financial_summary=ApartmentTotals(
                         total_unpaid=totals.total_unpaid,
                         total_overdue=totals.total_overdue,
                    ),
               )
          )

     return OwnerDashboardResponse(
          apartments=items,
          statistics=OwnerDashboardStatistics(
               total_apartments=len(apartments),
               active_leases=active_leases,
               total_unpaid=total_unpaid,
               total_overdue=total_overdue,
          ),
     )


def get_tenant_dashboard(db: Session, tenant: User, today: Optional[date] = None) -> TenantDashboardResponse:
     """
     The tenant's apartment, its owner and what is due.

     Raises:
          NoActiveLease: The tenant has no active lease
     """
     lease = get_active_lease_for_tenant(db, tenant.id)
     if lease is None:
          logger.info("Tenant %s has no active lease for the dashboard", tenant.id)
          raise NoActiveLease("You do not have an active lease")

     apartment = lease.apartment
     totals = lease_totals(db, lease, today)

     return TenantDashboardResponse(
          apartment=TenantDashboardApartment(
               id=apartment.id,
               name=apartment.name,
               address=apartment.address,
               owner=DashboardOwner(
                    id=apartment.owner.id,
                    full_name=apartment.owner.full_name,
                    email=apartment.owner.email,
               ),
          ),
          financial_summary=TenantFinancialSummary(
               total_due=totals.total_unpaid,
               total_overdue=totals.total_overdue,
               upcoming_charges=totals.upcoming_preview(),
          ),
     )
