# errors.py
"""
Application errors and global exception handlers.

Every error response has the same JSON shape:
     {"error": "<machine category>", "message": "<human text>", "details": {...}}

Services raise the AppError subclasses below; the handlers registered in
main.py translate them into responses. Business-rule violations are expected
outcomes and are logged at INFO, never as failures.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
     """Base application error."""

     error_code = "internal_error"
     status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
     default_message = "An internal server error occurred"

     def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
          self.message = message or self.default_message
          self.details = details or {}
          super().__init__(self.message)


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------

class Unauthorized(AppError):
     error_code = "unauthorized"
     status_code = status.HTTP_401_UNAUTHORIZED
     default_message = "Missing or invalid credentials"


class Forbidden(AppError):
     error_code = "forbidden"
     status_code = status.HTTP_403_FORBIDDEN
     default_message = "You do not have permission to perform this action"


# ---------------------------------------------------------------------------
# Not found / not visible
# ---------------------------------------------------------------------------

class NotFoundError(AppError):
     status_code = status.HTTP_404_NOT_FOUND


class UserNotFound(NotFoundError):
     error_code = "user_not_found"
     default_message = "User profile not found"


class ApartmentNotFound(NotFoundError):
     error_code = "apartment_not_found"
     default_message = "Apartment not found"


class ChargeNotFound(NotFoundError):
     error_code = "charge_not_found"
     default_message = "Charge not found"


class LeaseNotFound(NotFoundError):
     error_code = "lease_not_found"
     default_message = "Lease not found"


class NoAttachment(NotFoundError):
     error_code = "no_attachment"
     default_message = "Charge has no attachment"


# ---------------------------------------------------------------------------
# Business rules
# ---------------------------------------------------------------------------

class BusinessRuleError(AppError):
     status_code = status.HTTP_400_BAD_REQUEST


class ActiveLeaseExists(BusinessRuleError):
     error_code = "active_lease_exists"
     default_message = "Apartment already has an active lease"


class UserHasLease(BusinessRuleError):
     error_code = "user_has_lease"
     default_message = "You already have an active lease"


class ApartmentHasLease(BusinessRuleError):
     error_code = "apartment_has_lease"
     default_message = "Apartment already has an active tenant"


class ApartmentHasLeases(BusinessRuleError):
     error_code = "apartment_has_leases"
     default_message = "Cannot delete an apartment with existing leases"


class InvitationConflict(BusinessRuleError):
     error_code = "invitation_conflict"
     default_message = "Another invitation was created for this apartment at the same time"


class InvalidToken(BusinessRuleError):
     error_code = "invalid_token"
     default_message = "Invitation link is invalid or has already been used"


class NoActiveLease(BusinessRuleError):
     error_code = "no_active_lease"
     default_message = "Apartment has no active lease"


class ChargeFullyPaid(BusinessRuleError):
     error_code = "charge_fully_paid"
     default_message = "A fully paid charge cannot be edited"


class AmountTooLow(BusinessRuleError):
     error_code = "amount_too_low"
     default_message = "Charge amount cannot be lower than the total already paid"


class CannotDeletePaidCharge(BusinessRuleError):
     error_code = "cannot_delete_paid_charge"
     default_message = "A fully paid charge cannot be deleted"


class PaymentExceedsCharge(BusinessRuleError):
     error_code = "payment_exceeds_charge"
     default_message = "Total payments cannot exceed the charge amount"


class InvalidFileType(BusinessRuleError):
     error_code = "invalid_file_type"
     default_message = "Invalid file type. Allowed: PDF, JPG, PNG"


class FileTooLarge(AppError):
     error_code = "file_too_large"
     status_code = 413
     default_message = "File size cannot exceed 5MB"


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------

class StorageError(AppError):
     error_code = "storage_error"
     default_message = "File storage operation failed"


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------

def _error_body(error_code: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
     return {"error": error_code, "message": message, "details": details or {}}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
     """Handler for AppError subclasses."""
     if exc.status_code >= 500:
          logger.error(
               "Request failed: %s %s -> %s",
               request.method,
               request.url.path,
               exc.error_code,
               exc_info=exc,
          )
     else:
          logger.info(
               "Request rejected: %s %s -> %s (%s)",
               request.method,
               request.url.path,
               exc.error_code,
               exc.message,
          )
     return JSONResponse(
          status_code=exc.status_code,
          content=_error_body(exc.error_code, exc.message, exc.details),
     )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
     """Handler for HTTPException raised by the framework (unknown routes, bad methods)."""
     error_code_map = {
          400: "bad_request",
          401: "unauthorized",
          403: "forbidden",
          404: "not_found",
          405: "method_not_allowed",
          413: "payload_too_large",
     }
     error_code = error_code_map.get(exc.status_code, "internal_error")
     return JSONResponse(
          status_code=exc.status_code,
          content=_error_body(error_code, str(exc.detail)),
          headers=getattr(exc, "headers", None),
     )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
     """Request validation errors are reported as 400 with field-level detail."""
     errors = [
          {
               "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
               "message": error.get("msg"),
               "type": error.get("type"),
          }
          for error in exc.errors()
     ]
     return JSONResponse(
          status_code=status.HTTP_400_BAD_REQUEST,
          content=_error_body("validation_error", "Validation error", {"errors": errors}),
     )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
     """Handler for unhandled exceptions (store failures, bugs)."""
     logger.exception(
          "Unhandled exception on %s %s: %s",
          request.method,
          request.url.path,
          type(exc).__name__,
          exc_info=exc,
     )
     return JSONResponse(
          status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
          content=_error_body("internal_error", "An internal server error occurred"),
     )


def register_exception_handlers(app: FastAPI) -> None:
     app.add_exception_handler(AppError, app_error_handler)
     app.add_exception_handler(HTTPException, http_exception_handler)
     app.add_exception_handler(RequestValidationError, validation_exception_handler)
     app.add_exception_handler(Exception, generic_exception_handler)
