"""
Pydantic schemas for unit API request validation.

Occupancy (tenant_id / is_available) is not patched directly; it changes
through the assign and unassign routes so both fields stay in step.
"""
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class UnitCreate(BaseModel):
     property_id: str = Field(..., min_length=1)
     unit_number: str = Field(..., min_length=1, max_length=50)
     rent_amount: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": "0b8d3c1e-7a43-4d5e-9d0e-3b7f1d2a6c90",
                    "unit_number": "101",
                    "rent_amount": 950.00
               }
          }
     )


class UnitUpdate(BaseModel):
     property_id: Optional[str] = Field(None, min_length=1)
     unit_number: Optional[str] = Field(None, min_length=1, max_length=50)
     rent_amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)


class UnitAssignment(BaseModel):
     """Body for POST /api/units/{id}/assign."""
     tenant_id: str = Field(..., min_length=1)
     rent_amount: Optional[Decimal] = Field(
          None, max_digits=12, decimal_places=2, description="New unit rent; defaults to the tenant's rent"
     )
