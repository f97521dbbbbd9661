# schemas/tenant.py
"""
Pydantic schemas for tenant API request validation.
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models.tenant import TenantStatus


class TenantCreate(BaseModel):
     """Schema for creating a tenant."""
     name: str = Field(..., min_length=1, max_length=200)
     email: str = Field(..., min_length=3, max_length=255)
     phone: Optional[str] = Field(None, max_length=50)
     unit_number: Optional[str] = Field(None, max_length=50, description="Unit reference, e.g. '101'")
     rent_amount: Decimal = Field(..., max_digits=12, decimal_places=2)
     deposit_amount: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)
     status: TenantStatus = TenantStatus.ACTIVE
     move_in_date: date
     lease_end_date: Optional[date] = None
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Lucia Fernandez",
                    "email": "lucia@example.com",
                    "unit_number": "101",
                    "rent_amount": 950.00,
                    "deposit_amount": 950.00,
                    "status": "active",
                    "move_in_date": "2026-01-01",
                    "lease_end_date": "2026-12-31"
               }
          }
     )


class TenantUpdate(BaseModel):
     """Schema for a partial tenant update."""
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     email: Optional[str] = Field(None, min_length=3, max_length=255)
     phone: Optional[str] = Field(None, max_length=50)
     unit_number: Optional[str] = Field(None, max_length=50)
     rent_amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
     deposit_amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
     status: Optional[TenantStatus] = None
     move_in_date: Optional[date] = None
     lease_end_date: Optional[date] = None
     notes: Optional[str] = None
