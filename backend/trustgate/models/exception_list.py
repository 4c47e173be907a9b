"""Exception List ORM — persists exception lists and their items.

Invariants:
    - (list_id, namespace_type) is unique per list
    - (item_id, namespace_type) is unique per item
    - id columns are UUID strings generated in Python
    - tie_breaker_id gives a stable order between items with equal sort values

Design Decisions:
    - JSON columns for entries/tags/_tags/comments/meta: opaque to the store
    - Items reference lists by list_id (no FK): the store mirrors a document
      index where items may be written before their list container
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from trustgate.db.base import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExceptionList(Base):
    """Exception list container."""
    __tablename__ = "exception_lists"
    __table_args__ = (
        UniqueConstraint("list_id", "namespace_type", name="uq_exception_lists_list_ns"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    list_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    namespace_type: Mapped[str] = mapped_column(String(20), nullable=False)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    system_tags: Mapped[list] = mapped_column(
        "_tags", JSON, nullable=False, default=list,
    )
    meta: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_by: Mapped[str] = mapped_column(String(255), nullable=False)
    tie_breaker_id: Mapped[str] = mapped_column(
        String(36), nullable=False, default=_uuid_str,
    )


class ExceptionListItem(Base):
    """Exception list item — one trusted app, exception, etc."""
    __tablename__ = "exception_list_items"
    __table_args__ = (
        UniqueConstraint("item_id", "namespace_type", name="uq_exception_list_items_item_ns"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    item_id: Mapped[str] = mapped_column(String(255), nullable=False)
    list_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="simple")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    entries: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    system_tags: Mapped[list] = mapped_column(
        "_tags", JSON, nullable=False, default=list,
    )
    namespace_type: Mapped[str] = mapped_column(String(20), nullable=False)
    meta: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    comments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_by: Mapped[str] = mapped_column(String(255), nullable=False)
    tie_breaker_id: Mapped[str] = mapped_column(
        String(36), nullable=False, default=_uuid_str,
    )
