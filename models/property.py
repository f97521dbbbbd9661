# models/property.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base, new_id


class Property(Base):
     """
     Property model - a building or house owned by one landlord.

     total_units is the declared capacity and may differ from the number of
     Unit rows; it is not reconciled.
     """
     __tablename__ = "properties"

     id = Column(String(36), primary_key=True, default=new_id)
     landlord_id = Column(String(36), nullable=False, index=True)

     name = Column(String(255), nullable=False)
     address = Column(String(500), nullable=False, default="")
     description = Column(Text, nullable=True)
     total_units = Column(Integer, default=0, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     units = relationship("Unit", back_populates="property", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}')>"
