# routers/consistency.py
"""
Data consistency API.

GET  /api/consistency:     scan tenants and units, most severe findings first.
POST /api/consistency/fix: apply the suggested fix of an auto-fixable finding.
"""
from typing import List

from fastapi import APIRouter, Depends

from dependencies import get_consistency_checker
from schemas.inconsistency import AutoFixResponse, DataInconsistency
from services.consistency_service import ConsistencyChecker

router = APIRouter(prefix="/api/consistency", tags=["consistency"])


@router.get("", response_model=List[DataInconsistency], summary="Scan for inconsistencies")
async def scan(checker: ConsistencyChecker = Depends(get_consistency_checker)):
     return await checker.check_all_inconsistencies()


@router.post("/fix", response_model=AutoFixResponse, summary="Auto-fix an inconsistency")
async def auto_fix(
     inconsistency: DataInconsistency,
     checker: ConsistencyChecker = Depends(get_consistency_checker),
):
     """
     Apply the finding's suggested fix.

     **fixed** is false when the finding is not auto-fixable or the write did
     not go through. Re-scan afterwards to refresh the list.
     """
     fixed = await checker.auto_fix_inconsistency(inconsistency)
     return AutoFixResponse(inconsistency_id=inconsistency.id, fixed=fixed)
