# schemas/inconsistency.py
"""
Computed data inconsistencies between tenant and unit records.

Produced fresh by every scan and never persisted.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class InconsistencyType(str, Enum):
     RENT_MISMATCH = "rent_mismatch"
     UNIT_ASSIGNMENT = "unit_assignment"
     MISSING_DATA = "missing_data"
     DUPLICATE_ASSIGNMENT = "duplicate_assignment"


class Severity(str, Enum):
     HIGH = "high"
     MEDIUM = "medium"
     LOW = "low"

     @property
     def rank(self) -> int:
          return {"high": 3, "medium": 2, "low": 1}[self.value]


class FixAction(str, Enum):
     UPDATE_UNIT_RENT = "update_unit_rent"
     UPDATE_TENANT_RENT = "update_tenant_rent"
     FIX_UNIT_ASSIGNMENT = "fix_unit_assignment"
     SET_RENT_AMOUNT = "set_rent_amount"
     ASSIGN_UNIT = "assign_unit"
     RESOLVE_DUPLICATE_ASSIGNMENT = "resolve_duplicate_assignment"


class SuggestedFix(BaseModel):
     action: FixAction
     description: str
     auto_fixable: bool = False


class AffectedEntities(BaseModel):
     """Snapshots of the records involved, taken at detection time."""
     tenant: Optional[Dict[str, Any]] = None
     unit: Optional[Dict[str, Any]] = None
     tenants: List[Dict[str, Any]] = Field(default_factory=list)


class DataInconsistency(BaseModel):
     id: str
     type: InconsistencyType
     severity: Severity
     title: str
     description: str
     affected_entities: AffectedEntities
     suggested_fix: SuggestedFix
     detected_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AutoFixResponse(BaseModel):
     inconsistency_id: str
     fixed: bool
