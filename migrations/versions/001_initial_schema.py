"""Initial schema — users, sponsorship packages and the three registration tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

Changes:
  - Create users table (Telegram users)
  - Create payment_packages table (sponsorship tiers, benefits as JSON)
  - Create registrations table (sponsor wizard submissions)
  - Create attendees table (delegates)
  - Create marathon_registrations table (First Lady Marathon runners)
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("telegram_id", sa.BigInteger(), nullable=False),
        sa.Column("username", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_users_telegram_id", "users", ["telegram_id"], unique=True)

    # ── payment_packages ──────────────────────────────────────────────────────
    op.create_table(
        "payment_packages",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False, server_default="KES"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("benefits", sa.JSON(), nullable=True),
        sa.Column("slots", sa.Integer(), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reservation_fee", sa.Numeric(14, 2), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_payment_packages_active", "payment_packages", ["active"])

    # ── registrations (sponsors) ──────────────────────────────────────────────
    op.create_table(
        "registrations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("company_website", sa.String(512), nullable=True),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("organization_type", sa.String(30), nullable=False),
        sa.Column("company_logo_url", sa.String(512), nullable=True),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_job_title", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("contact_phone", sa.String(50), nullable=False),
        sa.Column("package_id", sa.String(64), nullable=False),
        sa.Column("delegate_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("delegate_names", sa.JSON(), nullable=False),
        sa.Column("fascia_name", sa.String(25), nullable=False),
        sa.Column("social_media", sa.JSON(), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("terms_accepted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("consent_given", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    # ── attendees (delegates) ─────────────────────────────────────────────────
    op.create_table(
        "attendees",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("job_title", sa.String(255), nullable=True),
        sa.Column("address", sa.String(512), nullable=True),
        sa.Column("ticket_type", sa.String(20), nullable=False, server_default="general"),
        sa.Column("attendance_type", sa.String(20), nullable=False, server_default="physical"),
        sa.Column("dietary_requirements", sa.Text(), nullable=True),
        sa.Column("special_needs", sa.Text(), nullable=True),
        sa.Column("terms_accepted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    # ── marathon_registrations ────────────────────────────────────────────────
    op.create_table(
        "marathon_registrations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("emergency_contact_name", sa.String(255), nullable=False),
        sa.Column("emergency_contact_phone", sa.String(50), nullable=False),
        sa.Column("emergency_contact_relationship", sa.String(100), nullable=False),
        sa.Column("race_category", sa.String(5), nullable=False),
        sa.Column("t_shirt_size", sa.String(5), nullable=False),
        sa.Column("previous_experience", sa.Text(), nullable=True),
        sa.Column("medical_conditions", sa.Text(), nullable=True),
        sa.Column("terms_accepted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("liability_accepted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("completion_status", sa.String(20), nullable=False, server_default="registered"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("marathon_registrations")
    op.drop_table("attendees")
    op.drop_table("registrations")
    op.drop_index("ix_payment_packages_active", table_name="payment_packages")
    op.drop_table("payment_packages")
    op.drop_index("ix_users_telegram_id", table_name="users")
    op.drop_table("users")
