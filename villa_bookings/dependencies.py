"""
FastAPI dependency injection providers.

Route handlers receive the database engine through get_db_engine so tests can
swap in an isolated engine with app.dependency_overrides.
"""

from __future__ import annotations

from typing import Generator

from sqlalchemy.engine import Engine

from villa_bookings.db.engine import engine


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Example:
        >>> from fastapi import Depends
        >>> from villa_bookings.dependencies import get_db_engine
        >>>
        >>> @router.post("/bookings/approve")
        >>> def approve_booking(
        ...     payload: BookingApprovalRequest,
        ...     engine: Engine = Depends(get_db_engine),
        ... ):
        ...     return approve_or_reject(engine, ...)

    Testing Example:
        >>> app.dependency_overrides[get_db_engine] = lambda: sqlite_engine
        >>> client = TestClient(app)
    """
    yield engine
