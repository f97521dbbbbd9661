# services/stats_service.py
"""
Aggregate Stats - dashboard metrics derived from already-loaded records.

compute_stats is pure: same inputs (including `today`) give the same
DashboardStats, and the input sequences are never modified.
"""
import asyncio
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from models.payment import PaymentStatus
from models.tenant import TenantStatus
from schemas.rows import PaymentRow, PropertyRow, TenantRow, UnitRow
from schemas.stats import DashboardStats
from services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 30

STATS_TABLES = ("tenants", "properties", "units", "payments")


def _in_month(day: date, reference: date) -> bool:
     return day.year == reference.year and day.month == reference.month


def _within(day: Optional[date], start: date, days: int) -> bool:
     return day is not None and start <= day <= start + timedelta(days=days)


def compute_stats(
     tenants: Sequence[TenantRow],
     properties: Sequence[PropertyRow],
     units: Sequence[UnitRow],
     payments: Sequence[PaymentRow],
     today: Optional[date] = None,
     move_in_horizon_days: int = DEFAULT_HORIZON_DAYS,
     move_out_horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> DashboardStats:
     """
     Compute dashboard metrics.

     Args:
          tenants, properties, units, payments: the landlord's records
          today: reference date for "current month" and upcoming windows
          move_in_horizon_days: window for upcoming move-ins, inclusive
          move_out_horizon_days: window for upcoming lease ends, inclusive

     Returns:
          DashboardStats. expected_monthly_revenue is the rent of occupied
          units; collected_monthly_revenue sums completed payments dated in
          the current month.
     """
     today = today or date.today()

     total_units = len(units)
     occupied = [unit for unit in units if not unit.is_available]
     occupied_units = len(occupied)

     active_ids = {tenant.id for tenant in tenants if tenant.status == TenantStatus.ACTIVE}

     completed_this_month = [
          payment for payment in payments
          if payment.status == PaymentStatus.COMPLETED and _in_month(payment.payment_date, today)
     ]
     paid_active = active_ids & {payment.tenant_id for payment in completed_this_month}

     return DashboardStats(
          total_properties=len(properties),
          total_units=total_units,
          occupied_units=occupied_units,
          vacant_units=total_units - occupied_units,
          active_tenants=len(active_ids),
          total_tenants=len(tenants),
          expected_monthly_revenue=sum((unit.rent_amount for unit in occupied), Decimal("0")),
          collected_monthly_revenue=sum((payment.amount for payment in completed_this_month), Decimal("0")),
          occupancy_rate=occupied_units / total_units * 100 if total_units > 0 else 0.0,
          collection_rate=len(paid_active) / len(active_ids) * 100 if active_ids else 0.0,
          overdue_payments=len(active_ids) - len(paid_active),
          upcoming_move_ins=sum(1 for t in tenants if _within(t.move_in_date, today, move_in_horizon_days)),
          upcoming_move_outs=sum(1 for t in tenants if _within(t.lease_end_date, today, move_out_horizon_days)),
     )


async def load_dashboard_stats(
     gateway: PersistenceGateway,
     today: Optional[date] = None,
     move_in_horizon_days: int = DEFAULT_HORIZON_DAYS,
     move_out_horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> DashboardStats:
     """Read the four collections concurrently; a failed read counts as empty."""
     results = await asyncio.gather(
          *(gateway.select(table) for table in STATS_TABLES),
          return_exceptions=True,
     )
     collections = []
     for table, result in zip(STATS_TABLES, results):
          if isinstance(result, BaseException):
               logger.warning("Stats for %s computed without %s: %s", gateway.owner_id, table, result)
               result = []
          collections.append(result)

     tenants, properties, units, payments = collections
     return compute_stats(
          tenants,
          properties,
          units,
          payments,
          today=today,
          move_in_horizon_days=move_in_horizon_days,
          move_out_horizon_days=move_out_horizon_days,
     )
