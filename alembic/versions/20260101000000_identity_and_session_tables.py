"""Create consumer, retailer, admin and user_sessions tables.

Revision ID: 20260101000000
Revises:
Create Date: 2026-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260101000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _name_columns() -> list[sa.Column]:
    return [
        sa.Column("first_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("middle_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=False, server_default=""),
    ]


def upgrade() -> None:
    op.create_table(
        "consumer",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, server_default=""),
        *_name_columns(),
        sa.Column("gender", sa.String(length=32), nullable=True),
        sa.Column("birthdate", sa.Date(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("location_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_consumer")),
    )
    op.create_index(op.f("ix_consumer_username"), "consumer", ["username"], unique=True)

    op.create_table(
        "retailer",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, server_default=""),
        *_name_columns(),
        sa.Column("location_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_retailer")),
    )
    op.create_index(op.f("ix_retailer_username"), "retailer", ["username"], unique=True)

    op.create_table(
        "admin",
        sa.Column("admin_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        *_name_columns(),
        sa.Column("admin_type", sa.String(length=64), nullable=False, server_default="admin"),
        sa.PrimaryKeyConstraint("admin_id", name=op.f("pk_admin")),
    )
    op.create_index(op.f("ix_admin_username"), "admin", ["username"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("user_type", sa.String(length=32), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("session_id", name=op.f("pk_user_sessions")),
    )
    op.create_index(
        op.f("ix_user_sessions_expires_at"), "user_sessions", ["expires_at"], unique=False
    )
    op.create_index(
        "ix_user_sessions_owner", "user_sessions", ["user_type", "user_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_user_sessions_owner", table_name="user_sessions")
    op.drop_index(op.f("ix_user_sessions_expires_at"), table_name="user_sessions")
    op.drop_table("user_sessions")
    op.drop_index(op.f("ix_admin_username"), table_name="admin")
    op.drop_table("admin")
    op.drop_index(op.f("ix_retailer_username"), table_name="retailer")
    op.drop_table("retailer")
    op.drop_index(op.f("ix_consumer_username"), table_name="consumer")
    op.drop_table("consumer")
