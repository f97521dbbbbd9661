# schemas/receipt.py
"""
Pydantic schemas for the rent ledger (paid/receipt grid) API.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class TrackedPayment(BaseModel):
     """In-memory tracking record; month_index is 0-indexed (0 = January)."""
     tenant_id: str
     year: int
     month_index: int = Field(..., ge=0, le=11)
     paid: bool = True
     amount: Optional[Decimal] = None


class PaidToggle(BaseModel):
     paid: bool


class ReceiptToggle(BaseModel):
     has_receipt: bool


class LegacyPaymentRecord(BaseModel):
     """Entry of the legacy payment_records_{userId}_{year} overlay."""
     tenantId: str
     year: int
     month: int = Field(..., ge=0, le=11, description="0-indexed month")
     paid: bool
     amount: Optional[Decimal] = None
     paymentDate: Optional[date] = None


class LegacyMigrationRequest(BaseModel):
     records: List[LegacyPaymentRecord]

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "records": [
                         {"tenantId": "6a2f0f53-0d1c-4c0e-9a57-1f7c2b1f9e11", "year": 2026, "month": 0, "paid": True, "amount": 950}
                    ]
               }
          }
     )


class LedgerCell(BaseModel):
     month_index: int
     paid: bool
     has_receipt: bool


class LedgerTenantRow(BaseModel):
     tenant_id: str
     tenant_name: str
     rent_amount: Decimal
     months: List[LedgerCell]


class LedgerResponse(BaseModel):
     year: int
     selectable_years: List[int]
     tenants: List[LedgerTenantRow]
