# models/payment_receipt.py
"""
PaymentReceipt model - per tenant/month "paid, and proof exists" overlay.

Independent of the payments table: a row means the landlord marked the month
as paid; has_receipt records whether proof of payment is on file.
Months are persisted 1-indexed (1 = January).
"""
from sqlalchemy import Boolean, Column, Integer, String, Numeric, DateTime, UniqueConstraint, CheckConstraint, func
from .base import Base, new_id


class PaymentReceipt(Base):
     __tablename__ = "payment_receipts"
     __table_args__ = (
          UniqueConstraint("user_id", "tenant_id", "year", "month", name="uq_payment_receipts_key"),
          CheckConstraint("month BETWEEN 1 AND 12", name="ck_payment_receipts_month"),
     )

     id = Column(String(36), primary_key=True, default=new_id)
     user_id = Column(String(36), nullable=False, index=True)
     tenant_id = Column(String(36), nullable=False, index=True)
     year = Column(Integer, nullable=False)
     month = Column(Integer, nullable=False)

     has_receipt = Column(Boolean, default=True, nullable=False)
     amount = Column(Numeric(12, 2), nullable=True)
     paid_at = Column(DateTime, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return (
               f"<PaymentReceipt(tenant_id={self.tenant_id}, year={self.year}, "
               f"month={self.month}, has_receipt={self.has_receipt})>"
          )
