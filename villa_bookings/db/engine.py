"""
SQLAlchemy engine singleton with production-ready connection pooling.

This module creates a single engine instance with connection pooling configured
for concurrent request handling. SQLite URLs (local development and tests) get
the options their pool classes accept instead of the PostgreSQL pool sizing.
"""

from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from villa_bookings.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def engine_options(url: str) -> dict[str, Any]:
    """
    Build create_engine() keyword arguments for the given database URL.

    Args:
        url: SQLAlchemy database URL

    Returns:
        dict: Keyword arguments for create_engine()
    """
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": 10,  # Connections kept open in the pool
        "max_overflow": 20,  # Additional connections when pool is exhausted
        "pool_pre_ping": True,  # Detect stale connections before use
        "pool_recycle": 3600,  # Recycle connections after 1 hour
    }


engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    echo=False,
    **engine_options(DATABASE_URL),
)


def check_engine_health(db_engine: Engine | None = None) -> bool:
    """
    Check if the database engine is healthy and connections are working.

    Used by the /ready endpoint to verify database connectivity before
    allowing traffic to the service.

    Args:
        db_engine: Engine to probe (defaults to the module singleton)

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with (db_engine or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
