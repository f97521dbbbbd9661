# database.py
"""
SQLAlchemy async engine and session management.

This module provides:
- Async engine configured from DATABASE_URL
- Session factory used by the persistence gateway
- Connection utilities

Usage:
     from database import get_session_context

     async with get_session_context() as session:
          tenants = (await session.execute(select(Tenant))).scalars().all()
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)


def build_engine(url: str = DATABASE_URL, **kwargs) -> AsyncEngine:
     """Create an async engine; sqlite URLs skip the pool sizing options."""
     options = {"echo": SQL_ECHO}
     if not url.startswith("sqlite"):
          options.update(
               pool_size=5,
               max_overflow=10,
               pool_timeout=30,
               pool_recycle=1800,  # Recycle connections after 30 minutes
          )
     options.update(kwargs)
     return create_async_engine(url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
     return async_sessionmaker(
          bind=bind,
          autoflush=False,
          expire_on_commit=False,
     )


engine = build_engine()

SessionLocal = build_session_factory(engine)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
     """
     FastAPI dependency returning the session factory.

     The gateway opens one session per call so that independent reads can
     run concurrently; tests override this dependency.
     """
     return SessionLocal


@asynccontextmanager
async def get_session_context(
     factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
     """
     Context manager for a single unit of work.

     Commits on success, rolls back and re-raises on error.
     """
     session = (factory or SessionLocal)()
     try:
          yield session
          await session.commit()
     except Exception:
          await session.rollback()
          raise
     finally:
          await session.close()


async def init_db(bind: AsyncEngine | None = None) -> None:
     """
     Create all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     async with (bind or engine).begin() as conn:
          await conn.run_sync(Base.metadata.create_all)


async def check_connection(bind: AsyncEngine | None = None) -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          async with (bind or engine).connect() as conn:
               await conn.execute(text("SELECT 1"))
          return True
     except Exception as e:
          logger.error("Database connection failed: %s", e)
          return False
