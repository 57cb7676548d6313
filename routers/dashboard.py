# routers/dashboard.py
"""
Role-dependent dashboard.
"""
from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import User
from schemas.dashboard import OwnerDashboardResponse, TenantDashboardResponse
from services.dashboard_service import get_owner_dashboard, get_tenant_dashboard

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get(
     "",
     response_model=Union[OwnerDashboardResponse, TenantDashboardResponse],
     summary="Dashboard for the current user"
)
def dashboard(
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user)
):
     """
     - **Owner**: every apartment with its lease status and totals, plus portfolio statistics
     - **Tenant**: the leased apartment, its owner and what is due
     """
     if user.is_owner:
          return get_owner_dashboard(db, user)
     return get_tenant_dashboard(db, user)
