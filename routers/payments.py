# routers/payments.py
"""
Payment API.

Payments are append-only: rows are inserted by manual entry or by the hosted
checkout function, and only a pending row may later settle.

GET  /api/payments:         list payments, optionally for one tenant.
POST /api/payments:         record a payment by hand.
POST /api/payments/webhook: settle a pending payment written by checkout.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dependencies import get_gateway
from models.payment import PaymentStatus
from schemas.payment import PaymentCreate, PaymentWebhook
from schemas.rows import PaymentRow
from services.gateway import PersistenceGateway
from services.validation import validate_payment_amount

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("", response_model=List[PaymentRow], summary="List payments")
async def list_payments(
     tenant_id: Optional[str] = Query(None, description="Filter by tenant ID"),
     gateway: PersistenceGateway = Depends(get_gateway),
):
     filters = {"tenant_id": tenant_id} if tenant_id else None
     return await gateway.select("payments", filters, order_by=["payment_date"])


@router.post("", response_model=PaymentRow, status_code=status.HTTP_201_CREATED, summary="Record a payment")
async def create_payment(body: PaymentCreate, gateway: PersistenceGateway = Depends(get_gateway)):
     amount = validate_payment_amount(body.amount)

     tenants = await gateway.select("tenants", {"id": body.tenant_id})
     if not tenants:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Tenant with ID {body.tenant_id} not found",
          )

     values = body.model_dump()
     values.update(
          amount=amount,
          payment_type=body.payment_type.value,
          status=body.status.value,
     )
     created = await gateway.insert("payments", [values])
     return created[0]


@router.post("/webhook", summary="Settle a pending payment")
async def payment_webhook(body: PaymentWebhook, gateway: PersistenceGateway = Depends(get_gateway)):
     """
     Receives the settlement result for a payment the checkout function
     inserted as pending.
     """
     if body.status == PaymentStatus.PENDING:
          return {"message": "Ignored non-final status"}

     payments = await gateway.select("payments", {"id": body.payment_id})
     if not payments:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
     payment = payments[0]
     if payment.status != PaymentStatus.PENDING:
          return {"message": "Already processed", "payment_id": payment.id, "status": payment.status.value}

     updated = await gateway.update("payments", payment.id, {"status": body.status.value})
     logger.info(
          "Payment %s settled as %s (ref %s)", payment.id, updated.status.value, body.provider_reference
     )
     return {"payment_id": updated.id, "status": updated.status.value}
