# routers/receipts.py
"""
Rent ledger API - the tenant x month paid/receipt grid.

Months in paths are 0-indexed (0 = January), matching the grid.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status

from dependencies import get_gateway, get_rent_ledger
from schemas.receipt import LedgerResponse, LegacyMigrationRequest, PaidToggle, ReceiptToggle
from services.gateway import PersistenceGateway
from services.receipt_service import RentLedger, cleanup_orphaned_receipts, selectable_years

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/receipts", tags=["receipts"])


def _ledger_response(ledger: RentLedger) -> LedgerResponse:
     return LedgerResponse(
          year=ledger.year,
          selectable_years=selectable_years(),
          tenants=ledger.grid(),
     )


@router.get("/{year}", response_model=LedgerResponse, summary="Paid/receipt grid for a year")
async def get_year(year: int, ledger: RentLedger = Depends(get_rent_ledger)):
     await ledger.load_year(year)
     return _ledger_response(ledger)


@router.put(
     "/{year}/{tenant_id}/{month_index}",
     response_model=LedgerResponse,
     summary="Mark a month paid or unpaid",
)
async def set_paid(
     year: int,
     tenant_id: str,
     body: PaidToggle,
     month_index: int = Path(..., ge=0, le=11),
     ledger: RentLedger = Depends(get_rent_ledger),
):
     await ledger.load_year(year)
     if not await ledger.set_paid(tenant_id, month_index, body.paid):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Tenant with ID {tenant_id} not found",
          )
     return _ledger_response(ledger)


@router.put(
     "/{year}/{tenant_id}/{month_index}/receipt",
     response_model=LedgerResponse,
     summary="Record whether proof of payment exists",
)
async def set_receipt(
     year: int,
     tenant_id: str,
     body: ReceiptToggle,
     month_index: int = Path(..., ge=0, le=11),
     ledger: RentLedger = Depends(get_rent_ledger),
):
     await ledger.load_year(year)
     if not await ledger.set_receipt(tenant_id, month_index, body.has_receipt):
          raise HTTPException(
               status_code=status.HTTP_409_CONFLICT,
               detail="Month must be marked paid before recording a receipt",
          )
     return _ledger_response(ledger)


@router.post("/{year}/migrate", summary="Import the legacy local payment records")
async def migrate(
     year: int,
     body: LegacyMigrationRequest,
     ledger: RentLedger = Depends(get_rent_ledger),
):
     """
     One-time import of the legacy `payment_records_{userId}_{year}` overlay.

     The client keeps its local copy until this call succeeds.
     """
     migrated = await ledger.migrate_legacy_records(year, body.records)
     return {"year": year, "migrated": migrated}


@router.post("/cleanup", summary="Delete receipts of deleted tenants")
async def cleanup(gateway: PersistenceGateway = Depends(get_gateway)):
     removed = await cleanup_orphaned_receipts(gateway)
     return {"removed": removed}
