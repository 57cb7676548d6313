# schemas/charge.py
"""
Pydantic schemas for Charge API request/response validation.

Payment status fields are derived on every read and never accepted as input.
"""
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.charge import ChargeType, PaymentStatus
from schemas.payment import PaymentResponse
from schemas.types import AmountIn, Money

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class ChargeCreate(BaseModel):
     """Schema for creating a charge on the apartment's active lease."""
     amount: AmountIn = Field(..., description="Charge amount (positive, max 2 decimal places)")
     due_date: date = Field(..., description="Payment due date")
     type: ChargeType = Field(..., description="rent, bill or other")
     comment: Optional[str] = Field(None, max_length=300)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 2500.00,
                    "due_date": "2026-02-10",
                    "type": "rent",
                    "comment": "February rent",
               }
          }
     )


class ChargeUpdate(BaseModel):
     """Partial update; at least one field must be provided."""
     amount: Optional[AmountIn] = None
     due_date: Optional[date] = None
     type: Optional[ChargeType] = None
     comment: Optional[str] = Field(None, max_length=300)

     model_config = ConfigDict(
          json_schema_extra={"example": {"amount": 2400.00}},
     )

     @model_validator(mode="after")
     def _check_fields(self):
          if not self.model_fields_set:
               raise ValueError("At least one field must be provided")
          # Only the comment may be cleared.
          for name in ("amount", "due_date", "type"):
               if name in self.model_fields_set and getattr(self, name) is None:
                    raise ValueError(f"{name} cannot be null")
          return self

     def changes(self) -> dict:
          return self.model_dump(exclude_unset=True)


class ChargeResponse(BaseModel):
     """A charge together with its derived payment status."""
     id: str
     lease_id: str
     amount: Money
     due_date: date
     type: ChargeType
     comment: Optional[str] = None
     attachment_path: Optional[str] = None
     attachment_url: Optional[str] = None
     payment_status: PaymentStatus
     total_paid: Money
     remaining_amount: Money
     is_overdue: bool
     created_by: str
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "id": "7e0b2c4a-0c49-4d0e-8a6c-5f7a3f1b9c20",
                    "lease_id": "c2a1f0de-3d5b-4c9a-8a0e-2f1b9d7c6e55",
                    "amount": 1000.00,
                    "due_date": "2026-01-10",
                    "type": "rent",
                    "comment": None,
                    "attachment_path": None,
                    "attachment_url": None,
                    "payment_status": "partially_paid",
                    "total_paid": 400.00,
                    "remaining_amount": 600.00,
                    "is_overdue": True,
                    "created_by": "3f1c2a9e-7b7e-4f43-9a55-1c0a9f0e2d11",
                    "created_at": "2026-01-01T08:00:00",
                    "updated_at": "2026-01-01T08:00:00",
               }
          }
     )


class ChargeDetailsResponse(ChargeResponse):
     payments: List[PaymentResponse]


class ChargesByMonthResponse(BaseModel):
     """Charges grouped by "YYYY-MM" of the due date, newest month first."""
     lease_id: str
     charges_by_month: Dict[str, List[ChargeResponse]]


class AttachmentResponse(BaseModel):
     id: str
     attachment_path: Optional[str] = None
     attachment_url: Optional[str] = None
