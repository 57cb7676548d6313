# schemas/dashboard.py
"""
Pydantic schemas for financial summaries and role-specific dashboards.
"""
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from models.charge import ChargeType
from models.lease import LeaseStatus
from schemas.types import Money


class UpcomingCharge(BaseModel):
     id: str
     amount: Money
     remaining_amount: Money
     due_date: date
     type: ChargeType


class FinancialSummary(BaseModel):
     """Totals over the charges of one lease."""
     total_unpaid: Money
     total_partially_paid: Money
     total_overdue: Money
     upcoming_charges_count: int
     upcoming_charges: List[UpcomingCharge]

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "total_unpaid": 1500.00,
                    "total_partially_paid": 200.00,
                    "total_overdue": 500.00,
                    "upcoming_charges_count": 1,
                    "upcoming_charges": [
                         {
                              "id": "7e0b2c4a-0c49-4d0e-8a6c-5f7a3f1b9c20",
                              "amount": 1000.00,
                              "remaining_amount": 1000.00,
                              "due_date": "2026-03-10",
                              "type": "rent",
                         }
                    ],
               }
          }
     )


# ---------------------------------------------------------------------------
# Owner dashboard
# ---------------------------------------------------------------------------

class TenantName(BaseModel):
     full_name: str


class ApartmentTotals(BaseModel):
     total_unpaid: Money
     total_overdue: Money


class OwnerDashboardApartment(BaseModel):
     id: str
     name: str
     address: str
     lease_status: Optional[LeaseStatus] = None
     tenant: Optional[TenantName] = None
     financial_summary: ApartmentTotals


class OwnerDashboardStatistics(BaseModel):
     total_apartments: int
     active_leases: int
     total_unpaid: Money
     total_overdue: Money


class OwnerDashboardResponse(BaseModel):
     role: Literal["owner"] = "owner"
     apartments: List[OwnerDashboardApartment]
     statistics: OwnerDashboardStatistics


# ---------------------------------------------------------------------------
# Tenant dashboard
# ---------------------------------------------------------------------------

class DashboardOwner(BaseModel):
     id: str
     full_name: str
     email: str


class TenantDashboardApartment(BaseModel):
     id: str
     name: str
     address: str
     owner: DashboardOwner


class TenantFinancialSummary(BaseModel):
     total_due: Money
     total_overdue: Money
     upcoming_charges: List[UpcomingCharge]


class TenantDashboardResponse(BaseModel):
     role: Literal["tenant"] = "tenant"
     apartment: TenantDashboardApartment
     financial_summary: TenantFinancialSummary
