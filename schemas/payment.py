# schemas/payment.py
"""
Pydantic schemas for payments recorded against a charge.
"""
from datetime import date, datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from schemas.types import AmountIn, Money


class PaymentCreate(BaseModel):
     """Request body for POST /charges/{charge_id}/payments."""

     amount: AmountIn = Field(..., description="Amount received (positive, max 2 decimal places)")
     payment_date: date = Field(..., description="Date the money was received")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 1000.00,
                    "payment_date": "2026-01-10",
               }
          }
     )


class PaymentResponse(BaseModel):
     """Schema for payment response."""

     id: str
     charge_id: str
     amount: Money
     payment_date: date
     created_by: str
     created_at: datetime

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": "8c7b6a59-4d3e-4f2a-9b1c-0d9e8f7a6b5c",
                    "charge_id": "7e0b2c4a-0c49-4d0e-8a6c-5f7a3f1b9c20",
                    "amount": 1000.00,
                    "payment_date": "2026-01-10",
                    "created_by": "3f1c2a9e-7b7e-4f43-9a55-1c0a9f0e2d11",
                    "created_at": "2026-01-10T18:02:11",
               }
          },
     )


class PaymentListResponse(BaseModel):
     payments: List[PaymentResponse]
     total: int
