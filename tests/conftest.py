"""
Shared fixtures.

Tests run against an in-memory SQLite database without a schema prefix. The
environment is set before any villa_bookings module is imported.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ALLOWED_ORIGINS", "*")
os.environ["DB_SCHEMA"] = ""

from typing import Any, Callable, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, func, insert, select  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from villa_bookings.dependencies import get_db_engine  # noqa: E402
from villa_bookings.main import app  # noqa: E402
from villa_bookings.models.approvals import BookingApproval  # noqa: E402
from villa_bookings.models.base import Base  # noqa: E402
from villa_bookings.models.bookings import BOOKING_COLLECTIONS  # noqa: E402
from villa_bookings.models.properties import Property  # noqa: E402
from villa_bookings.models.sync_events import SyncEvent  # noqa: E402
from villa_bookings.utils.datetime import utc_now  # noqa: E402


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database with all tables created."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def client(db_engine: Engine) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the in-memory database."""
    app.dependency_overrides[get_db_engine] = lambda: db_engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seed_booking(db_engine: Engine) -> Callable[..., dict[str, Any]]:
    """
    Insert a booking document into one collection.

    Usage: seed_booking("live_bookings", id="b1", duplicate_check_hash="h1")
    """

    def _seed(collection: str, **fields: Any) -> dict[str, Any]:
        now = utc_now()
        row: dict[str, Any] = {
            "guest_name": "Test Guest",
            "property_name": "Villa Test",
            "check_in_date": "2025-07-20",
            "check_out_date": "2025-07-25",
            "status": "pending_approval",
            "sync_version": 1,
            "created_at": now,
            "updated_at": now,
            **fields,
        }
        with db_engine.begin() as conn:
            conn.execute(insert(BOOKING_COLLECTIONS[collection]).values(**row))
        return row

    return _seed


@pytest.fixture
def seed_property(db_engine: Engine) -> Callable[..., dict[str, Any]]:
    """Insert a properties row. Usage: seed_property(id="p1", airbnb_listing_id="A123")."""

    def _seed(**fields: Any) -> dict[str, Any]:
        now = utc_now()
        row: dict[str, Any] = {
            "name": "Villa Test",
            "address": "55/45 Moo 8 Koh Phangan",
            "latitude": 9.7319,
            "longitude": 100.0136,
            "created_at": now,
            "updated_at": now,
            **fields,
        }
        with db_engine.begin() as conn:
            conn.execute(insert(Property).values(**row))
        return row

    return _seed


@pytest.fixture
def read_booking(db_engine: Engine) -> Callable[[str, str], dict[str, Any] | None]:
    def _read(collection: str, booking_id: str) -> dict[str, Any] | None:
        table = BOOKING_COLLECTIONS[collection]
        with db_engine.connect() as conn:
            row = conn.execute(select(table).where(table.id == booking_id)).mappings().fetchone()
        return dict(row) if row else None

    return _read


@pytest.fixture
def count_rows(db_engine: Engine) -> Callable[[str], int]:
    """Count rows in booking_approvals or sync_events."""
    tables = {"booking_approvals": BookingApproval, "sync_events": SyncEvent}

    def _count(table_name: str) -> int:
        with db_engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(tables[table_name])).scalar_one()

    return _count
