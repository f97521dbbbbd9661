# schemas/rows.py
"""
Typed row shapes returned by the persistence gateway.

Every row read from a table is parsed into one of these models at the
gateway boundary, so services never handle loosely-typed dicts.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.tenant import TenantStatus, UNASSIGNED_UNIT
from models.payment import PaymentStatus, PaymentType


class RowModel(BaseModel):
     """Base for gateway rows: built from ORM instances, immutable."""
     model_config = ConfigDict(from_attributes=True, frozen=True)


class PropertyRow(RowModel):
     id: str
     landlord_id: str
     name: str
     address: str = ""
     description: Optional[str] = None
     total_units: int = 0


class UnitRow(RowModel):
     id: str
     property_id: str
     unit_number: str
     tenant_id: Optional[str] = None
     rent_amount: Decimal = Decimal("0")
     is_available: bool = True


class TenantRow(RowModel):
     id: str
     landlord_id: str
     name: str
     email: str
     phone: Optional[str] = None
     unit_number: Optional[str] = None
     rent_amount: Decimal = Decimal("0")
     deposit_amount: Decimal = Decimal("0")
     status: TenantStatus = TenantStatus.ACTIVE
     move_in_date: date
     lease_end_date: Optional[date] = None
     notes: Optional[str] = None

     @field_validator("unit_number")
     @classmethod
     def _blank_unit(cls, value: Optional[str]) -> Optional[str]:
          """Collapse empty strings and the front-end placeholder to None."""
          if value is None:
               return None
          value = value.strip()
          if not value or value == UNASSIGNED_UNIT:
               return None
          return value

     @property
     def has_unit(self) -> bool:
          return self.unit_number is not None


class PaymentRow(RowModel):
     id: str
     user_id: str
     tenant_id: str
     amount: Decimal
     payment_date: date
     payment_method: str = "transfer"
     payment_type: PaymentType = PaymentType.RENT
     status: PaymentStatus = PaymentStatus.PENDING
     notes: Optional[str] = None


class ReceiptRow(RowModel):
     """Receipt row as persisted: month is 1-indexed."""
     id: str
     user_id: str
     tenant_id: str
     year: int
     month: int = Field(..., ge=1, le=12)
     has_receipt: bool = True
     amount: Optional[Decimal] = None
     paid_at: Optional[datetime] = None
