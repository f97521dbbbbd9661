# schemas/stats.py
from decimal import Decimal
from pydantic import BaseModel


class DashboardStats(BaseModel):
     """
     Dashboard metrics for one landlord.

     expected_monthly_revenue is the rent of occupied units;
     collected_monthly_revenue is what completed payments brought in this month.
     """
     total_properties: int = 0
     total_units: int = 0
     occupied_units: int = 0
     vacant_units: int = 0
     active_tenants: int = 0
     total_tenants: int = 0
     expected_monthly_revenue: Decimal = Decimal("0")
     collected_monthly_revenue: Decimal = Decimal("0")
     occupancy_rate: float = 0.0
     collection_rate: float = 0.0
     overdue_payments: int = 0
     upcoming_move_ins: int = 0
     upcoming_move_outs: int = 0
