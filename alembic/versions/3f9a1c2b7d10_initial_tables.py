"""initial tables

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-19 09:30:00.000000

Creates projects, frequent_clients, client_discount_profiles and
quote_sessions. Idempotent: tables that create_all() already made are skipped.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    if not _table_exists("projects"):
        op.create_table(
            "projects",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("job_title", sa.String(), nullable=False),
            sa.Column("client_name", sa.String(), nullable=False),
            sa.Column("service_type", sa.String(), nullable=True),
            sa.Column("language", sa.String(), nullable=True),
            sa.Column("variant", sa.String(), nullable=True),
            sa.Column("urgency", sa.String(), nullable=True),
            sa.Column("duration", sa.Float(), nullable=True),
            sa.Column("add_ons", sa.JSON(), nullable=True),
            sa.Column("difficulty_percent", sa.Float(), nullable=True),
            sa.Column("custom_discount_percent", sa.Float(), nullable=True),
            sa.Column("base_price", sa.Float(), nullable=True),
            sa.Column("additional_fees", sa.Float(), nullable=True),
            sa.Column("discount", sa.Float(), nullable=True),
            sa.Column("total", sa.Float(), nullable=True),
            sa.Column("estimated_days", sa.Integer(), nullable=True),
            sa.Column("date", sa.DateTime(), nullable=True),
            sa.Column("custom_due_date", sa.DateTime(), nullable=True),
            sa.Column(
                "status",
                sa.Enum("PENDING", "IN_PROGRESS", "COMPLETED", name="projectstatus"),
                nullable=True,
            ),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_projects_id", "projects", ["id"])
        op.create_index("ix_projects_client_name", "projects", ["client_name"])
        op.create_index("ix_projects_date", "projects", ["date"])

    if not _table_exists("frequent_clients"):
        op.create_table(
            "frequent_clients",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("name"),
        )
        op.create_index("ix_frequent_clients_id", "frequent_clients", ["id"])

    if not _table_exists("client_discount_profiles"):
        op.create_table(
            "client_discount_profiles",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("client_name", sa.String(), nullable=False),
            sa.Column("difficulty_percent", sa.Float(), nullable=True),
            sa.Column("custom_discount_percent", sa.Float(), nullable=True),
            sa.Column("has_difficulty_level", sa.Boolean(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("client_name"),
        )
        op.create_index("ix_client_discount_profiles_id", "client_discount_profiles", ["id"])

    if not _table_exists("quote_sessions"):
        op.create_table(
            "quote_sessions",
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("params_json", sa.JSON(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )


def downgrade() -> None:
    for table in ["quote_sessions", "client_discount_profiles", "frequent_clients", "projects"]:
        if _table_exists(table):
            op.drop_table(table)
