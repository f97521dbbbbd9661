# dependencies.py
"""
Shared FastAPI dependencies: caller identity and the owner-scoped gateway.
"""
from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import JWT_ALGORITHM, JWT_SECRET
from database import get_session_factory
from services.consistency_service import ConsistencyChecker, create_consistency_checker
from services.gateway import SqlAlchemyGateway
from services.receipt_service import RentLedger, create_rent_ledger


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
     except JWTError:
          raise HTTPException(status_code=403, detail="Invalid token")
     if not payload.get("id"):
          raise HTTPException(status_code=403, detail="Token has no user id")
     return payload


def get_gateway(
     token: dict = Depends(verify_token),
     session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> SqlAlchemyGateway:
     """Gateway scoped to the landlord named by the bearer token."""
     return SqlAlchemyGateway(session_factory, str(token["id"]))


def get_consistency_checker(gateway: SqlAlchemyGateway = Depends(get_gateway)) -> ConsistencyChecker:
     return create_consistency_checker(gateway)


def get_rent_ledger(gateway: SqlAlchemyGateway = Depends(get_gateway)) -> RentLedger:
     return create_rent_ledger(gateway)
