# models/base.py
import uuid

from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
     """Primary keys are UUID strings, matching the ids the front-end stores."""
     return str(uuid.uuid4())


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Every table sets its own __tablename__ to match the hosted schema.
     """
