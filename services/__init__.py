# services/__init__.py
"""
Service layer: persistence gateway and the reconciliation services built on it.
"""
from .gateway import PersistenceGateway, SqlAlchemyGateway
from .consistency_service import ConsistencyChecker, create_consistency_checker
from .receipt_service import RentLedger, create_rent_ledger
from .stats_service import compute_stats, load_dashboard_stats

__all__ = [
     "PersistenceGateway",
     "SqlAlchemyGateway",
     "ConsistencyChecker",
     "create_consistency_checker",
     "RentLedger",
     "create_rent_ledger",
     "compute_stats",
     "load_dashboard_stats",
]
