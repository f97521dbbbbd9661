# services/gateway.py
"""
Persistence Gateway - owner-scoped record store over SQLAlchemy.

The reconciliation services only talk to tables through this contract:

     select(table, filters)            -> rows
     insert(table, rows)               -> rows
     update(table, id, patch)          -> row
     delete(table, id)                 -> None
     upsert(table, rows, conflict_keys) -> rows

Every call is implicitly scoped to one landlord (the caller identity), and
every row coming out is parsed into its typed row model (schemas.rows).
Each call opens its own session, so independent calls may be awaited
concurrently with asyncio.gather.
"""
import abc
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import ValidationError as SchemaError
from sqlalchemy import and_, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database import get_session_context
from errors import DataAccessError, NotFoundError
from models import Payment, PaymentReceipt, Property, Tenant, Unit
from models.base import new_id
from schemas.rows import PaymentRow, PropertyRow, ReceiptRow, RowModel, TenantRow, UnitRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableSpec:
     """How a logical table maps onto a model, a row type and an owner column."""
     model: type
     row_type: type
     # None means the row is owned through its property (units)
     owner_column: Optional[str]


TABLES: Dict[str, TableSpec] = {
     "properties": TableSpec(Property, PropertyRow, "landlord_id"),
     "units": TableSpec(Unit, UnitRow, None),
     "tenants": TableSpec(Tenant, TenantRow, "landlord_id"),
     "payments": TableSpec(Payment, PaymentRow, "user_id"),
     "payment_receipts": TableSpec(PaymentReceipt, ReceiptRow, "user_id"),
}

# Columns a patch may never touch
_PROTECTED_COLUMNS = {"id", "landlord_id", "user_id", "created_at"}


class PersistenceGateway(abc.ABC):
     """Record store contract consumed by the reconciliation services."""

     owner_id: str

     @abc.abstractmethod
     async def select(
          self,
          table: str,
          filters: Optional[Dict[str, Any]] = None,
          order_by: Optional[Sequence[str]] = None,
     ) -> List[RowModel]:
          ...

     @abc.abstractmethod
     async def insert(self, table: str, rows: Iterable[Dict[str, Any]]) -> List[RowModel]:
          ...

     @abc.abstractmethod
     async def update(self, table: str, record_id: str, patch: Dict[str, Any]) -> RowModel:
          ...

     @abc.abstractmethod
     async def delete(self, table: str, record_id: str) -> None:
          ...

     @abc.abstractmethod
     async def upsert(
          self,
          table: str,
          rows: Iterable[Dict[str, Any]],
          conflict_keys: Sequence[str],
     ) -> List[RowModel]:
          ...


class SqlAlchemyGateway(PersistenceGateway):
     """PersistenceGateway backed by an async SQLAlchemy session factory."""

     def __init__(self, session_factory: async_sessionmaker[AsyncSession], owner_id: str):
          if not owner_id:
               raise ValueError("owner_id is required to scope the gateway")
          self._session_factory = session_factory
          self.owner_id = owner_id

     # ------------------------------------------------------------------
     # Helpers
     # ------------------------------------------------------------------

     @staticmethod
     def _spec(table: str) -> TableSpec:
          try:
               return TABLES[table]
          except KeyError:
               raise DataAccessError(f"Unknown table '{table}'", table=table) from None

     @staticmethod
     def _column(spec: TableSpec, name: str):
          column = spec.model.__table__.columns.get(name)
          if column is None:
               raise DataAccessError(
                    f"Unknown column '{name}' on {spec.model.__tablename__}",
                    table=spec.model.__tablename__,
               )
          return getattr(spec.model, name)

     def _owner_clause(self, spec: TableSpec):
          if spec.owner_column is not None:
               return getattr(spec.model, spec.owner_column) == self.owner_id
          owned_properties = select(Property.id).where(Property.landlord_id == self.owner_id)
          return spec.model.property_id.in_(owned_properties)

     def _filter_clauses(self, spec: TableSpec, filters: Optional[Dict[str, Any]]) -> list:
          clauses = []
          for name, value in (filters or {}).items():
               column = self._column(spec, name)
               if isinstance(value, (list, tuple, set, frozenset)):
                    clauses.append(column.in_(list(value)))
               elif value is None:
                    clauses.append(column.is_(None))
               else:
                    clauses.append(column == value)
          return clauses

     def _stamp_owner(self, spec: TableSpec, row: Dict[str, Any]) -> Dict[str, Any]:
          values = dict(row)
          for name in values:
               self._column(spec, name)
          if spec.owner_column is not None:
               values[spec.owner_column] = self.owner_id
          values.setdefault("id", new_id())
          return values

     @staticmethod
     def _parse(spec: TableSpec, records: Iterable[Any]) -> List[RowModel]:
          try:
               return [spec.row_type.model_validate(record) for record in records]
          except SchemaError as e:
               logger.error("Malformed %s row from store: %s", spec.model.__tablename__, e)
               raise DataAccessError(
                    f"Malformed row in {spec.model.__tablename__}", table=spec.model.__tablename__
               ) from e

     @asynccontextmanager
     async def _unit_of_work(self, table: str, operation: str):
          """Session for one gateway call; store failures become DataAccessError."""
          try:
               async with get_session_context(self._session_factory) as session:
                    yield session
          except SQLAlchemyError as e:
               logger.error("Gateway %s on %s failed for owner %s: %s", operation, table, self.owner_id, e)
               raise DataAccessError(f"{operation} on {table} failed", table=table) from e

     async def _ensure_owned_properties(self, session: AsyncSession, rows: List[Dict[str, Any]]) -> None:
          property_ids = {row.get("property_id") for row in rows}
          result = await session.execute(
               select(Property.id).where(Property.landlord_id == self.owner_id, Property.id.in_(property_ids))
          )
          owned = set(result.scalars().all())
          for property_id in property_ids:
               if property_id not in owned:
                    raise NotFoundError("properties", str(property_id))

     async def _get_owned(self, session: AsyncSession, spec: TableSpec, record_id: str):
          result = await session.execute(
               select(spec.model).where(spec.model.id == record_id, self._owner_clause(spec))
          )
          return result.scalars().first()

     # ------------------------------------------------------------------
     # Contract
     # ------------------------------------------------------------------

     async def select(self, table, filters=None, order_by=None):
          spec = self._spec(table)
          stmt = select(spec.model).where(self._owner_clause(spec), *self._filter_clauses(spec, filters))
          if order_by:
               stmt = stmt.order_by(*(self._column(spec, name) for name in order_by))
          async with self._unit_of_work(table, "select") as session:
               result = await session.execute(stmt)
               records = result.scalars().all()
          return self._parse(spec, records)

     async def insert(self, table, rows):
          spec = self._spec(table)
          values = [self._stamp_owner(spec, row) for row in rows]
          if not values:
               return []
          async with self._unit_of_work(table, "insert") as session:
               if spec.owner_column is None:
                    await self._ensure_owned_properties(session, values)
               records = [spec.model(**row) for row in values]
               session.add_all(records)
               await session.flush()
               for record in records:
                    await session.refresh(record)
               parsed = self._parse(spec, records)
          return parsed

     async def update(self, table, record_id, patch):
          spec = self._spec(table)
          for name in patch:
               self._column(spec, name)
               if name in _PROTECTED_COLUMNS:
                    raise DataAccessError(f"Column '{name}' cannot be patched", table=table)
          async with self._unit_of_work(table, "update") as session:
               if spec.owner_column is None and "property_id" in patch:
                    await self._ensure_owned_properties(session, [patch])
               record = await self._get_owned(session, spec, record_id)
               if record is None:
                    raise NotFoundError(table, record_id)
               for name, value in patch.items():
                    setattr(record, name, value)
               await session.flush()
               await session.refresh(record)
               parsed = self._parse(spec, [record])[0]
          return parsed

     async def delete(self, table, record_id):
          spec = self._spec(table)
          async with self._unit_of_work(table, "delete") as session:
               record = await self._get_owned(session, spec, record_id)
               if record is not None:
                    await session.delete(record)

     async def upsert(self, table, rows, conflict_keys):
          spec = self._spec(table)
          values = [self._stamp_owner(spec, row) for row in rows]
          if not values:
               return []
          for name in conflict_keys:
               self._column(spec, name)
          if any(name not in row for row in values for name in conflict_keys):
               raise DataAccessError(f"Every upsert row needs {', '.join(conflict_keys)}", table=table)

          async with self._unit_of_work(table, "upsert") as session:
               if spec.owner_column is None:
                    await self._ensure_owned_properties(session, values)
               dialect = session.bind.dialect.name
               if dialect in ("sqlite", "postgresql"):
                    await self._native_upsert(session, spec, values, conflict_keys, dialect)
               else:
                    await self._select_then_write(session, spec, values, conflict_keys)

               records = []
               for row in values:
                    key = [self._column(spec, name) == row[name] for name in conflict_keys]
                    result = await session.execute(
                         select(spec.model)
                         .where(self._owner_clause(spec), and_(*key))
                         .execution_options(populate_existing=True)
                    )
                    records.append(result.scalars().one())
               parsed = self._parse(spec, records)
          return parsed

     async def _native_upsert(self, session, spec, values, conflict_keys, dialect) -> None:
          insert_fn = sqlite_insert if dialect == "sqlite" else pg_insert
          # One statement per key set; a conflict only overwrites the columns the row supplied
          batches: Dict[tuple, List[Dict[str, Any]]] = {}
          for row in values:
               batches.setdefault(tuple(sorted(row)), []).append(row)

          for columns, rows in batches.items():
               stmt = insert_fn(spec.model).values(rows)
               update_set = {
                    name: stmt.excluded[name]
                    for name in columns
                    if name not in conflict_keys and name not in _PROTECTED_COLUMNS
               }
               if "updated_at" in spec.model.__table__.columns:
                    update_set["updated_at"] = func.now()
               if update_set:
                    stmt = stmt.on_conflict_do_update(index_elements=list(conflict_keys), set_=update_set)
               else:
                    stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_keys))
               await session.execute(stmt)

     async def _select_then_write(self, session, spec, values, conflict_keys) -> None:
          for row in values:
               key = [self._column(spec, name) == row[name] for name in conflict_keys]
               result = await session.execute(select(spec.model).where(self._owner_clause(spec), and_(*key)))
               record = result.scalars().first()
               if record is None:
                    session.add(spec.model(**row))
               else:
                    for name, value in row.items():
                         if name not in conflict_keys and name not in _PROTECTED_COLUMNS:
                              setattr(record, name, value)
               await session.flush()
