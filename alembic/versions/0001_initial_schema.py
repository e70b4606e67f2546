"""initial_schema

Creates properties, reservations and property_access_codes.

On PostgreSQL the reservations table also gets an exclusion constraint so two
PENDING/CONFIRMED reservations of one property can never hold intersecting
date ranges, even if application code is bypassed. daterange('[]') makes both
endpoints inclusive, matching the application-level overlap check: a stay
ending on day 15 collides with one starting on day 15.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("price_per_night", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("price_per_night > 0", name="ck_properties_price_positive"),
    )
    op.create_index("ix_properties_owner_id", "properties", ["owner_id"])
    op.create_index("ix_properties_city", "properties", ["city"])
    op.create_index("ix_properties_status", "properties", ["status"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "property_id",
            sa.Uuid(),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("tenant_id", sa.String(64), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("unit_price_applied", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("pricing_type", sa.String(16), nullable=False),
        sa.Column("pricing_reason", sa.String(255), nullable=True),
        sa.Column("priced_by", sa.String(64), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("end_date > start_date", name="ck_reservations_date_order"),
    )
    op.create_index("ix_reservations_tenant_id", "reservations", ["tenant_id"])
    op.create_index(
        "ix_reservations_property_status_dates",
        "reservations",
        ["property_id", "status", "start_date", "end_date"],
    )

    op.create_table(
        "property_access_codes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "property_id",
            sa.Uuid(),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("issued_to_email", sa.String(255), nullable=False),
        sa.Column("code_lookup", sa.String(64), nullable=False),
        sa.Column("code_hash", sa.String(100), nullable=False),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("redeemed_by", sa.String(64), nullable=True),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by", sa.String(64), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index(
        "ix_property_access_codes_code_lookup",
        "property_access_codes",
        ["code_lookup"],
        unique=True,
    )
    op.create_index("ix_property_access_codes_issued_to_email", "property_access_codes", ["issued_to_email"])
    op.create_index("ix_property_access_codes_property_id", "property_access_codes", ["property_id"])

    if op.get_bind().dialect.name == "postgresql":
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute("""
            ALTER TABLE reservations
            ADD CONSTRAINT no_active_reservation_overlap
            EXCLUDE USING gist (
                property_id WITH =,
                daterange(start_date, end_date, '[]') WITH &&
            )
            WHERE (status IN ('PENDING', 'CONFIRMED'))
        """)


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS no_active_reservation_overlap")
        # btree_gist stays installed.

    op.drop_index("ix_property_access_codes_property_id", table_name="property_access_codes")
    op.drop_index("ix_property_access_codes_issued_to_email", table_name="property_access_codes")
    op.drop_index("ix_property_access_codes_code_lookup", table_name="property_access_codes")
    op.drop_table("property_access_codes")

    op.drop_index("ix_reservations_property_status_dates", table_name="reservations")
    op.drop_index("ix_reservations_tenant_id", table_name="reservations")
    op.drop_table("reservations")

    op.drop_index("ix_properties_status", table_name="properties")
    op.drop_index("ix_properties_city", table_name="properties")
    op.drop_index("ix_properties_owner_id", table_name="properties")
    op.drop_table("properties")
