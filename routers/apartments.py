# routers/apartments.py
"""
Apartment API routes.

Role-based access:
- Owner: creates, edits and deletes own apartments; sees all of them with lease info
- Tenant: sees only the apartment of their active lease, with owner contact
"""
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user, require_owner
from models import Apartment, Lease, User
from schemas.apartment import (
     ApartmentCreate,
     ApartmentResponse,
     ApartmentSummaryResponse,
     ApartmentUpdate,
     ApartmentWithLease,
     ApartmentWithOwner,
     LeaseInfo,
     OwnerApartmentList,
     PersonInfo,
     TenantApartmentList,
)
from schemas.lease import LeaseHistoryItem, LeaseListResponse, LeaseResponse
from services.apartment_service import ApartmentService
from services.dashboard_service import get_apartment_summary
from services.lease_service import archive_lease, list_leases

router = APIRouter(prefix="/api/apartments", tags=["apartments"])


def _build_apartment_response(apartment: Apartment, lease: Optional[Lease]) -> ApartmentWithLease:
     lease_info = None
     if lease is not None:
          lease_info = LeaseInfo(
               id=lease.id,
               status=lease.status,
               start_date=lease.start_date,
               tenant=PersonInfo.model_validate(lease.tenant),
          )
     return ApartmentWithLease(
          **ApartmentResponse.model_validate(apartment).model_dump(),
          lease=lease_info,
     )


@router.post(
     "",
     response_model=ApartmentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new apartment"
)
def create_apartment(
     body: ApartmentCreate,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     """
     Create an apartment owned by the caller.

     - **name**: 3-100 characters
     - **address**: 5-200 characters
     """
     apartment = ApartmentService.create_apartment(db, owner, body.name, body.address)
     return ApartmentResponse.model_validate(apartment)


@router.get(
     "",
     response_model=Union[OwnerApartmentList, TenantApartmentList],
     summary="List apartments visible to the caller"
)
def list_apartments(
     include_archived: bool = Query(False, description="Owners: show the last archived lease of vacant apartments"),
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user)
):
     """
     **Role-based result:**
     - **Owner**: every owned apartment, newest first, with its lease and tenant
     - **Tenant**: the leased apartment with owner contact (empty without a lease)
     """
     if user.is_owner:
          pairs = ApartmentService.list_owner_apartments(db, user, include_archived=include_archived)
          return OwnerApartmentList(
               apartments=[_build_apartment_response(apartment, lease) for apartment, lease in pairs]
          )

     apartments = ApartmentService.list_tenant_apartments(db, user)
     return TenantApartmentList(
          apartments=[
               ApartmentWithOwner(
                    id=apartment.id,
                    name=apartment.name,
                    address=apartment.address,
                    owner=PersonInfo.model_validate(apartment.owner),
               )
               for apartment in apartments
          ]
     )


@router.get(
     "/{apartment_id}",
     response_model=ApartmentWithLease,
     summary="Get apartment by ID"
)
def get_apartment(
     apartment_id: str,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user)
):
     """
     Visible to the owner and to the tenant holding the active lease;
     everyone else gets 404.
     """
     apartment, lease = ApartmentService.get_apartment(db, apartment_id, user)
     return _build_apartment_response(apartment, lease)


@router.patch(
     "/{apartment_id}",
     response_model=ApartmentResponse,
     summary="Update apartment"
)
def update_apartment(
     apartment_id: str,
     body: ApartmentUpdate,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     apartment = ApartmentService.update_apartment(
          db, apartment_id, owner, body.model_dump(exclude_unset=True)
     )
     return ApartmentResponse.model_validate(apartment)


@router.delete(
     "/{apartment_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete apartment"
)
def delete_apartment(
     apartment_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     """
     Delete an apartment without lease history. Pending invitations are removed with it.
     """
     ApartmentService.delete_apartment(db, apartment_id, owner)
     return None


@router.get(
     "/{apartment_id}/summary",
     response_model=ApartmentSummaryResponse,
     summary="Financial summary of an apartment"
)
def apartment_summary(
     apartment_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     return get_apartment_summary(db, apartment_id, owner)


@router.get(
     "/{apartment_id}/leases",
     response_model=LeaseListResponse,
     summary="Lease history of an apartment"
)
def apartment_leases(
     apartment_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     leases = list_leases(db, apartment_id, owner)
     return LeaseListResponse(
          leases=[
               LeaseHistoryItem(
                    **LeaseResponse.model_validate(lease).model_dump(),
                    tenant=PersonInfo.model_validate(lease.tenant),
               )
               for lease in leases
          ]
     )


@router.post(
     "/{apartment_id}/lease/archive",
     response_model=LeaseResponse,
     summary="Archive the active lease"
)
def archive_apartment_lease(
     apartment_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     """
     End the current tenancy (active -> archived). The apartment can then be
     offered to a new tenant and the tenant may accept another invitation.
     """
     lease = archive_lease(db, apartment_id, owner)
     return LeaseResponse.model_validate(lease)
