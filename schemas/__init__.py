from .rows import PropertyRow, UnitRow, TenantRow, PaymentRow, ReceiptRow
from .inconsistency import (
     DataInconsistency,
     InconsistencyType,
     Severity,
     FixAction,
     SuggestedFix,
     AffectedEntities,
)
from .stats import DashboardStats

__all__ = [
     "PropertyRow",
     "UnitRow",
     "TenantRow",
     "PaymentRow",
     "ReceiptRow",
     "DataInconsistency",
     "InconsistencyType",
     "Severity",
     "FixAction",
     "SuggestedFix",
     "AffectedEntities",
     "DashboardStats",
]
