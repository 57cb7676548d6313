# routers/charges.py
"""
Charge, payment and attachment API routes.

Role-based access:
- Owner: full lifecycle on charges of own apartments
- Tenant: read-only access to the charges of their own lease
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from azure_blob import BlobStorage, get_blob_storage
from database import get_session
from dependencies import get_current_user, require_owner
from models import PaymentStatus, User
from schemas.charge import (
     MONTH_PATTERN,
     AttachmentResponse,
     ChargeCreate,
     ChargeDetailsResponse,
     ChargeResponse,
     ChargesByMonthResponse,
     ChargeUpdate,
)
from schemas.payment import PaymentCreate, PaymentListResponse, PaymentResponse
from services import attachment_service, payment_service
from services.charge_service import ChargeService, attachment_url, to_charge_response
from utils.file_validation import MAX_FILE_SIZE

router = APIRouter(prefix="/api", tags=["charges"])


@router.post(
     "/apartments/{apartment_id}/charges",
     response_model=ChargeResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a charge"
)
def create_charge(
     apartment_id: str,
     body: ChargeCreate,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner),
     storage: BlobStorage = Depends(get_blob_storage)
):
     """
     Bill the tenant of the apartment's active lease.

     - **amount**: positive, at most 2 decimal places, up to 999999.99
     - **due_date**: payment due date
     - **type**: rent, bill or other
     - **comment**: optional, up to 300 characters
     """
     charge = ChargeService.create_charge(db, apartment_id, owner, body)
     return to_charge_response(charge, storage)


@router.get(
     "/apartments/{apartment_id}/charges",
     response_model=ChargesByMonthResponse,
     summary="List charges grouped by month"
)
def list_charges(
     apartment_id: str,
     lease_id: Optional[str] = Query(None, description="Lease to list (defaults to the active lease)"),
     month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="Due month, YYYY-MM"),
     payment_status: Optional[PaymentStatus] = Query(None, alias="status", description="Filter by payment status"),
     overdue: Optional[bool] = Query(None, description="Filter by overdue flag"),
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
     storage: BlobStorage = Depends(get_blob_storage)
):
     """
     Charges of one lease grouped by "YYYY-MM" of the due date, newest
     month first; within a month, latest due date first.
     """
     lease, grouped = ChargeService.get_charges(
          db,
          apartment_id,
          user,
          storage,
          lease_id=lease_id,
          month=month,
          status=payment_status,
          overdue=overdue,
     )
     return ChargesByMonthResponse(lease_id=lease.id, charges_by_month=grouped)


@router.get(
     "/charges/{charge_id}",
     response_model=ChargeDetailsResponse,
     summary="Get charge with payments"
)
def get_charge(
     charge_id: str,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
     storage: BlobStorage = Depends(get_blob_storage)
):
     charge = ChargeService.get_charge(db, charge_id, user)
     return ChargeDetailsResponse(
          **to_charge_response(charge, storage).model_dump(),
          payments=[PaymentResponse.model_validate(payment) for payment in charge.payments],
     )


@router.patch(
     "/charges/{charge_id}",
     response_model=ChargeResponse,
     summary="Update charge"
)
def update_charge(
     charge_id: str,
     body: ChargeUpdate,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner),
     storage: BlobStorage = Depends(get_blob_storage)
):
     """
     Partial update. Fully paid charges cannot be edited, and the amount
     cannot go below what has already been paid.
     """
     charge = ChargeService.update_charge(db, charge_id, owner, body.changes())
     return to_charge_response(charge, storage)


@router.delete(
     "/charges/{charge_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete charge"
)
def delete_charge(
     charge_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner),
     storage: BlobStorage = Depends(get_blob_storage)
):
     """
     Delete a charge that is not fully paid, with its payments and attachment.
     """
     ChargeService.delete_charge(db, charge_id, owner, storage)
     return None


# ---------------------------------------------------------------------------
# Attachments
# ---------------------------------------------------------------------------

@router.post(
     "/charges/{charge_id}/attachment",
     response_model=AttachmentResponse,
     summary="Upload or replace the charge attachment"
)
def upload_attachment(
     charge_id: str,
     file: UploadFile = File(...),
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner),
     storage: BlobStorage = Depends(get_blob_storage)
):
     """
     Accepts PDF, JPG or PNG up to 5MB. Replaces any existing attachment.
     """
     # One byte past the limit is enough to reject oversized files.
     data = file.file.read(MAX_FILE_SIZE + 1)
     charge = attachment_service.set_attachment(db, charge_id, owner, data, file.content_type, storage)
     return AttachmentResponse(
          id=charge.id,
          attachment_path=charge.attachment_path,
          attachment_url=attachment_url(storage, charge.attachment_path),
     )


@router.delete(
     "/charges/{charge_id}/attachment",
     response_model=AttachmentResponse,
     summary="Remove the charge attachment"
)
def delete_attachment(
     charge_id: str,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner),
     storage: BlobStorage = Depends(get_blob_storage)
):
     charge = attachment_service.remove_attachment(db, charge_id, owner, storage)
     return AttachmentResponse(id=charge.id, attachment_path=None, attachment_url=None)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

@router.post(
     "/charges/{charge_id}/payments",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment"
)
def create_payment(
     charge_id: str,
     body: PaymentCreate,
     db: Session = Depends(get_session),
     owner: User = Depends(require_owner)
):
     """
     Record money received. The total paid can never exceed the charge amount.
     """
     payment = payment_service.record_payment(db, charge_id, owner, body.amount, body.payment_date)
     return PaymentResponse.model_validate(payment)


@router.get(
     "/charges/{charge_id}/payments",
     response_model=PaymentListResponse,
     summary="List payments of a charge"
)
def list_payments(
     charge_id: str,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user)
):
     payments = payment_service.list_payments(db, charge_id, user)
     return PaymentListResponse(
          payments=[PaymentResponse.model_validate(payment) for payment in payments],
          total=len(payments),
     )
