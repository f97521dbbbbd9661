"""
Pydantic schemas for property API request validation.
"""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class PropertyCreate(BaseModel):
     """Schema for creating a property."""
     name: str = Field(..., min_length=1, max_length=255)
     address: str = Field(..., min_length=1, max_length=500)
     description: Optional[str] = None
     total_units: int = Field(1, ge=0, description="Planned number of units")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Calle Mayor 1",
                    "address": "Calle Mayor 1, 28013 Madrid",
                    "total_units": 4
               }
          }
     )


class PropertyUpdate(BaseModel):
     """Schema for a partial property update."""
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     address: Optional[str] = Field(None, min_length=1, max_length=500)
     description: Optional[str] = None
     total_units: Optional[int] = Field(None, ge=0)
