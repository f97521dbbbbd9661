# routers/stats.py
"""
Dashboard stats API.

GET /api/stats: occupancy, revenue and collection metrics for the caller.
"""
from fastapi import APIRouter, Depends

from config import MOVE_IN_HORIZON_DAYS, MOVE_OUT_HORIZON_DAYS
from dependencies import get_gateway
from schemas.stats import DashboardStats
from services.gateway import PersistenceGateway
from services.stats_service import load_dashboard_stats

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=DashboardStats, summary="Dashboard stats")
async def get_stats(gateway: PersistenceGateway = Depends(get_gateway)):
     """
     Aggregate metrics for the landlord's dashboard.

     Collections that fail to load are counted as empty; this endpoint does
     not fail on a partial read.
     """
     return await load_dashboard_stats(
          gateway,
          move_in_horizon_days=MOVE_IN_HORIZON_DAYS,
          move_out_horizon_days=MOVE_OUT_HORIZON_DAYS,
     )
