# models/payment.py
"""
Payment model - append-only transactional record of money received.

Rows are inserted by manual entry or by the checkout webhook; only the status
of a pending row is ever changed afterwards.
"""
import enum
from sqlalchemy import Column, String, Numeric, Date, Text, DateTime, func
from .base import Base, new_id


class PaymentStatus(str, enum.Enum):
     """Settlement status of a payment."""
     PENDING = "pending"
     COMPLETED = "completed"
     FAILED = "failed"


class PaymentType(str, enum.Enum):
     RENT = "rent"
     DEPOSIT = "deposit"
     FEE = "fee"
     OTHER = "other"


class Payment(Base):
     __tablename__ = "payments"

     id = Column(String(36), primary_key=True, default=new_id)
     user_id = Column(String(36), nullable=False, index=True)
     tenant_id = Column(String(36), nullable=False, index=True)

     amount = Column(Numeric(12, 2), nullable=False)
     payment_date = Column(Date, nullable=False, index=True)
     payment_method = Column(String(50), nullable=False, default="transfer")
     payment_type = Column(String(20), nullable=False, default=PaymentType.RENT.value)
     status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)
     notes = Column(Text, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Payment(id={self.id}, amount={self.amount}, status='{self.status}')>"
