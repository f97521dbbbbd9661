# services/validation.py
"""
Write-side validation. Anything rejected here is never sent to the gateway.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from errors import ValidationError

MAX_RENT_AMOUNT = Decimal("50000")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
     try:
          amount = Decimal(str(value))
     except (InvalidOperation, ValueError, TypeError):
          raise ValidationError(f"{field} is not a number: {value!r}") from None
     if not amount.is_finite():
          raise ValidationError(f"{field} must be a finite number")
     return amount


def validate_rent_amount(value: Any) -> Decimal:
     amount = to_decimal(value, "rent_amount")
     if amount <= 0:
          raise ValidationError("Rent amount must be greater than zero")
     if amount > MAX_RENT_AMOUNT:
          raise ValidationError("Rent amount seems unusually high. Please verify.")
     return amount


def validate_deposit_amount(value: Any) -> Decimal:
     amount = to_decimal(value, "deposit_amount")
     if amount < 0:
          raise ValidationError("Deposit amount cannot be negative")
     return amount


def validate_lease_dates(move_in: Optional[date], lease_end: Optional[date]) -> None:
     if move_in and lease_end and lease_end <= move_in:
          raise ValidationError("Lease end date must be after the move-in date")


def validate_payment_amount(value: Any) -> Decimal:
     amount = to_decimal(value, "amount")
     if amount <= 0:
          raise ValidationError("Payment amount must be greater than zero")
     return amount


def validate_unit_rent(value: Any) -> Decimal:
     """Units may be listed without a price yet, so zero is allowed here."""
     amount = to_decimal(value, "rent_amount")
     if amount < 0:
          raise ValidationError("Rent amount cannot be negative")
     if amount > MAX_RENT_AMOUNT:
          raise ValidationError("Rent amount seems unusually high. Please verify.")
     return amount
