"""Create properties, booking collections and audit tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2025-07-21 10:12:03.418227

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[attr-defined]
from villa_bookings.config import SCHEMA

# revision identifiers, used by Alembic.
revision = "3f1c9a7d2b10"
down_revision = None
branch_labels = None
depends_on = None

BOOKING_TABLES = ("pending_bookings", "bookings", "live_bookings")
JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def booking_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("guest_name", sa.String(), nullable=True),
        sa.Column("guest_email", sa.String(), nullable=True),
        sa.Column("property_name", sa.String(), nullable=True),
        sa.Column("property_id", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("check_in_date", sa.String(), nullable=True),
        sa.Column("check_out_date", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("sync_version", sa.Integer(), nullable=False),
        sa.Column("duplicate_check_hash", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.String(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("source", sa.String(), nullable=True),
        sa.Column("raw_payload", JSON_TYPE, nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "properties",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("google_maps_link", sa.String(), nullable=True),
        sa.Column("pms_provider", sa.String(), nullable=True),
        sa.Column("pms_listing_id", sa.String(), nullable=True, unique=True),
        sa.Column("airbnb_listing_id", sa.String(), nullable=True, unique=True),
        sa.Column("booking_com_listing_id", sa.String(), nullable=True, unique=True),
        sa.Column("vrbo_listing_id", sa.String(), nullable=True, unique=True),
        sa.Column("raw_payload", JSON_TYPE, nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        schema=SCHEMA,
    )

    for table in BOOKING_TABLES:
        op.create_table(table, *booking_columns(), schema=SCHEMA)
        for column in ("property_id", "status", "duplicate_check_hash"):
            op.create_index(f"ix_{table}_{column}", table, [column], schema=SCHEMA)

    op.create_table(
        "booking_approvals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("admin_id", sa.String(), nullable=False),
        sa.Column("admin_name", sa.String(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("approval_level", sa.String(), server_default=sa.text("'admin'"), nullable=False),
        sa.Column("notify_guest", sa.Boolean(), server_default=sa.text("TRUE"), nullable=False),
        sa.Column("notify_staff", sa.Boolean(), server_default=sa.text("TRUE"), nullable=False),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_booking_approvals_booking_id", "booking_approvals", ["booking_id"], schema=SCHEMA
    )

    op.create_table(
        "sync_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("triggered_by", sa.String(), nullable=False),
        sa.Column("triggered_by_name", sa.String(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("changes", JSON_TYPE, nullable=False),
        sa.Column("platform", sa.String(), nullable=False),
        sa.Column("synced", sa.Boolean(), server_default=sa.text("FALSE"), nullable=False),
        schema=SCHEMA,
    )
    op.create_index("ix_sync_events_type", "sync_events", ["type"], schema=SCHEMA)
    op.create_index("ix_sync_events_entity_id", "sync_events", ["entity_id"], schema=SCHEMA)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("sync_events", schema=SCHEMA)
    op.drop_table("booking_approvals", schema=SCHEMA)
    for table in reversed(BOOKING_TABLES):
        op.drop_table(table, schema=SCHEMA)
    op.drop_table("properties", schema=SCHEMA)
