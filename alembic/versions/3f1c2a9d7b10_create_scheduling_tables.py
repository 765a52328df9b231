"""create scheduling tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2025-11-09 17:04:36.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ACTIVE_WHERE = "status IN ('agendado','reagendado')"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "services",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("category", sa.String(60), nullable=False),
        sa.Column("icon", sa.String(60)),
        sa.Column("price_cop", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration_min", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("duration_min > 0", name="ck_service_duration_positive"),
    )
    op.create_table(
        "barbers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("photo_url", sa.String(500)),
        sa.Column("phone", sa.String(20)),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("weekly_schedule", sa.Text(), nullable=False),
        sa.Column("exceptions", sa.Text(), nullable=False, server_default="[]"),
        *_timestamps(),
    )
    op.create_table(
        "barber_services",
        sa.Column(
            "barber_id",
            sa.String(36),
            sa.ForeignKey("barbers.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "service_id",
            sa.String(36),
            sa.ForeignKey("services.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_table(
        "clients",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(160), nullable=False),
        sa.Column("phone_e164", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "appointments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "service_id",
            sa.String(36),
            sa.ForeignKey("services.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "barber_id",
            sa.String(36),
            sa.ForeignKey("barbers.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "client_id",
            sa.String(36),
            sa.ForeignKey("clients.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("start_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("created_by_role", sa.String(6), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "end_date_time > start_date_time", name="ck_appt_time_order"
        ),
    )
    op.create_index("ix_appt_barber_id", "appointments", ["barber_id"])
    op.create_index("ix_appt_client_id", "appointments", ["client_id"])
    # ÍNDICE ÚNICO PARCIAL: solo un turno activo por (barbero, inicio)
    op.create_index(
        "ux_appt_barber_start_active",
        "appointments",
        ["barber_id", "start_date_time"],
        unique=True,
        postgresql_where=sa.text(ACTIVE_WHERE),
        sqlite_where=sa.text(ACTIVE_WHERE),
    )


def downgrade() -> None:
    op.drop_index("ux_appt_barber_start_active", table_name="appointments")
    op.drop_index("ix_appt_client_id", table_name="appointments")
    op.drop_index("ix_appt_barber_id", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("clients")
    op.drop_table("barber_services")
    op.drop_table("barbers")
    op.drop_table("services")
