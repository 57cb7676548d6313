# schemas/lease.py
"""
Pydantic schemas for leases.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from models.lease import LeaseStatus
from schemas.apartment import PersonInfo


class LeaseResponse(BaseModel):
     """Schema for lease response."""
     id: str
     apartment_id: str
     tenant_id: str
     status: LeaseStatus
     start_date: date
     archived_at: Optional[datetime] = None
     created_at: datetime

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": "c2a1f0de-3d5b-4c9a-8a0e-2f1b9d7c6e55",
                    "apartment_id": "0b6d1c52-5a4e-4a57-a0f3-1b4a1d5f6e01",
                    "tenant_id": "9a8b7c6d-5e4f-4a3b-2c1d-0e9f8a7b6c5d",
                    "status": "active",
                    "start_date": "2026-02-01",
                    "archived_at": None,
                    "created_at": "2026-02-01T09:12:00",
               }
          },
     )


class LeaseHistoryItem(LeaseResponse):
     tenant: PersonInfo


class LeaseListResponse(BaseModel):
     leases: List[LeaseHistoryItem]
