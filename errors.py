# errors.py
"""
Typed errors raised by the gateway and the reconciliation services.
"""


class RentaFluxError(Exception):
     """Base class for application errors."""


class DataAccessError(RentaFluxError):
     """A gateway read or write failed."""

     def __init__(self, message: str, table: str | None = None):
          super().__init__(message)
          self.table = table


class ValidationError(RentaFluxError):
     """Input to a write was rejected before it reached the gateway."""


class NotFoundError(RentaFluxError):
     """A referenced tenant, unit or record does not exist for this owner."""

     def __init__(self, table: str, record_id: str):
          super().__init__(f"{table} record {record_id} not found")
          self.table = table
          self.record_id = record_id


class ConflictError(RentaFluxError):
     """The write clashes with the current state of another record."""
