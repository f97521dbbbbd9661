# schemas/payment.py
"""
Pydantic schemas for the payment API.
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models.payment import PaymentStatus, PaymentType


class PaymentCreate(BaseModel):
     """Request body for POST /api/payments (manual entry)."""

     tenant_id: str = Field(..., min_length=1, description="Tenant the payment belongs to")
     amount: Decimal = Field(..., max_digits=12, decimal_places=2, description="Amount received")
     payment_date: date
     payment_method: str = Field("transfer", max_length=50)
     payment_type: PaymentType = PaymentType.RENT
     status: PaymentStatus = PaymentStatus.COMPLETED
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenant_id": "6a2f0f53-0d1c-4c0e-9a57-1f7c2b1f9e11",
                    "amount": 950.00,
                    "payment_date": "2026-10-01",
                    "payment_method": "transfer",
                    "payment_type": "rent",
                    "status": "completed",
               }
          }
     )


class PaymentWebhook(BaseModel):
     """
     Status write-back from the hosted checkout function.

     The checkout function inserts a pending payment; this reports how it settled.
     """

     payment_id: str = Field(..., min_length=1)
     status: PaymentStatus
     provider_reference: Optional[str] = Field(None, max_length=255)
