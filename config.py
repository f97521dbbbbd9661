# config.py
"""
Application settings read from the environment (.env supported).
"""
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./rentaflux.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM = "HS256"

CORS_ORIGINS = [origin for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", 10000))

# Forward-looking window for the dashboard's upcoming move-in / move-out counts
MOVE_IN_HORIZON_DAYS = int(os.getenv("MOVE_IN_HORIZON_DAYS", 30))
MOVE_OUT_HORIZON_DAYS = int(os.getenv("MOVE_OUT_HORIZON_DAYS", 30))
