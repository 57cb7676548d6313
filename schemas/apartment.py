# schemas/apartment.py
"""
Pydantic schemas for Apartment API request/response validation.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.lease import LeaseStatus
from schemas.dashboard import FinancialSummary


class ApartmentCreate(BaseModel):
     """Schema for creating a new apartment."""
     name: str = Field(..., min_length=3, max_length=100, description="Display name")
     address: str = Field(..., min_length=5, max_length=200, description="Street address")

     model_config = ConfigDict(
          str_strip_whitespace=True,
          json_schema_extra={
               "example": {
                    "name": "Mokotow 2-room",
                    "address": "ul. Pulawska 12/4, Warszawa",
               }
          },
     )


class ApartmentUpdate(BaseModel):
     """Partial update; at least one field must be provided."""
     name: Optional[str] = Field(None, min_length=3, max_length=100)
     address: Optional[str] = Field(None, min_length=5, max_length=200)

     model_config = ConfigDict(str_strip_whitespace=True)

     @model_validator(mode="after")
     def _require_one_field(self):
          provided = {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}
          if not provided:
               raise ValueError("At least one field must be provided")
          return self


class PersonInfo(BaseModel):
     id: str
     full_name: str
     email: str

     model_config = ConfigDict(from_attributes=True)


class LeaseInfo(BaseModel):
     id: str
     status: LeaseStatus
     start_date: date
     tenant: PersonInfo

     model_config = ConfigDict(from_attributes=True)


class ApartmentResponse(BaseModel):
     """Schema for apartment response."""
     id: str
     name: str
     address: str
     owner_id: str
     created_by: str
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": "0b6d1c52-5a4e-4a57-a0f3-1b4a1d5f6e01",
                    "name": "Mokotow 2-room",
                    "address": "ul. Pulawska 12/4, Warszawa",
                    "owner_id": "3f1c2a9e-7b7e-4f43-9a55-1c0a9f0e2d11",
                    "created_by": "3f1c2a9e-7b7e-4f43-9a55-1c0a9f0e2d11",
                    "created_at": "2026-01-31T10:30:00",
                    "updated_at": "2026-01-31T10:30:00",
               }
          },
     )


class ApartmentWithLease(ApartmentResponse):
     """Owner view: apartment plus its current (or most recent) lease."""
     lease: Optional[LeaseInfo] = None


class ApartmentWithOwner(BaseModel):
     """Tenant view: the leased apartment plus owner contact."""
     id: str
     name: str
     address: str
     owner: PersonInfo

     model_config = ConfigDict(from_attributes=True)


class OwnerApartmentList(BaseModel):
     apartments: List[ApartmentWithLease]


class TenantApartmentList(BaseModel):
     apartments: List[ApartmentWithOwner]


class SummaryApartment(BaseModel):
     id: str
     name: str
     address: str


class SummaryTenant(BaseModel):
     full_name: str


class SummaryLease(BaseModel):
     id: str
     status: LeaseStatus
     start_date: date
     tenant: SummaryTenant


class ApartmentSummaryResponse(BaseModel):
     """Owner-only financial overview of one apartment."""
     apartment: SummaryApartment
     lease: Optional[SummaryLease] = None
     financial_summary: FinancialSummary
