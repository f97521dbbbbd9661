# models/unit.py
from sqlalchemy import Boolean, Column, String, Numeric, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base, new_id


class Unit(Base):
     """
     Unit model - a rentable unit inside a property.

     tenant_id is a loose back-reference to the occupying tenant, not an
     ownership relation; is_available is False while a tenant is assigned.
     """
     __tablename__ = "units"
     __table_args__ = (
          UniqueConstraint("property_id", "unit_number", name="uq_units_property_unit_number"),
     )

     id = Column(String(36), primary_key=True, default=new_id)
     property_id = Column(String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)

     unit_number = Column(String(50), nullable=False)
     tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True)
     rent_amount = Column(Numeric(12, 2), default=0, nullable=False)
     is_available = Column(Boolean, default=True, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="units")

     def __repr__(self):
          return f"<Unit(id={self.id}, unit_number='{self.unit_number}', available={self.is_available})>"
