from .base import Base
from .property import Property
from .unit import Unit
from .tenant import Tenant, TenantStatus, UNASSIGNED_UNIT
from .payment import Payment, PaymentStatus, PaymentType
from .payment_receipt import PaymentReceipt

__all__ = [
     "Base",
     "Property",
     "Unit",
     "Tenant",
     "TenantStatus",
     "UNASSIGNED_UNIT",
     "Payment",
     "PaymentStatus",
     "PaymentType",
     "PaymentReceipt",
]
