"""Exception lists — exception_lists and exception_list_items tables.

Revision ID: 001_exception_lists
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_exception_lists"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "exception_lists",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("list_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("namespace_type", sa.String(20), nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("_tags", sa.JSON, nullable=False),
        sa.Column("meta", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by", sa.String(255), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_by", sa.String(255), nullable=False),
        sa.Column("tie_breaker_id", sa.String(36), nullable=False),
        sa.UniqueConstraint("list_id", "namespace_type", name="uq_exception_lists_list_ns"),
    )
    op.create_index("ix_exception_lists_list_id", "exception_lists", ["list_id"])

    op.create_table(
        "exception_list_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("item_id", sa.String(255), nullable=False),
        sa.Column("list_id", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="simple"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("entries", sa.JSON, nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("_tags", sa.JSON, nullable=False),
        sa.Column("namespace_type", sa.String(20), nullable=False),
        sa.Column("meta", sa.JSON, nullable=True),
        sa.Column("comments", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by", sa.String(255), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_by", sa.String(255), nullable=False),
        sa.Column("tie_breaker_id", sa.String(36), nullable=False),
        sa.UniqueConstraint("item_id", "namespace_type", name="uq_exception_list_items_item_ns"),
    )
    op.create_index("ix_exception_list_items_list_id", "exception_list_items", ["list_id"])


def downgrade() -> None:
    op.drop_index("ix_exception_list_items_list_id", table_name="exception_list_items")
    op.drop_table("exception_list_items")
    op.drop_index("ix_exception_lists_list_id", table_name="exception_lists")
    op.drop_table("exception_lists")
