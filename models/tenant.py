# models/tenant.py
import enum
from sqlalchemy import Column, String, Numeric, Date, Text, DateTime, func
from .base import Base, new_id


# Placeholder the front-end writes when a tenant has no unit
UNASSIGNED_UNIT = "Sin unidad"


class TenantStatus(str, enum.Enum):
     """Lifecycle status of a tenant."""
     ACTIVE = "active"
     LATE = "late"
     NOTICE = "notice"
     INACTIVE = "inactive"


class Tenant(Base):
     """
     Tenant model - a renter record owned by one landlord.

     unit_number is a free-text reference to Unit.unit_number, not a foreign
     key; the consistency checker reports when the two drift apart.
     """
     __tablename__ = "tenants"

     id = Column(String(36), primary_key=True, default=new_id)
     landlord_id = Column(String(36), nullable=False, index=True)

     # Contact
     name = Column(String(200), nullable=False)
     email = Column(String(255), nullable=False)
     phone = Column(String(50), nullable=True)

     # Lease
     unit_number = Column(String(50), nullable=True)
     rent_amount = Column(Numeric(12, 2), default=0, nullable=False)
     deposit_amount = Column(Numeric(12, 2), default=0, nullable=False)
     status = Column(String(20), default=TenantStatus.ACTIVE.value, nullable=False, index=True)
     move_in_date = Column(Date, nullable=False)
     lease_end_date = Column(Date, nullable=True)
     notes = Column(Text, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.name}', unit='{self.unit_number}')>"
