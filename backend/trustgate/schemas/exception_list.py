"""Exception List Schemas — records and per-operation options of the list client.

Invariants:
    - Each list client operation takes exactly one explicit options model
    - `_tags` travels on the wire under its own name; Python code uses system_tags
    - Entries and comments are opaque dicts at this layer (callers own their shape)

Design Decisions:
    - Pydantic over TypedDict: equality and validation come for free, so callers
      and test doubles compare whole option objects instead of loose kwargs
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from trustgate.core.domain_types import (
    ExceptionListItemType,
    ExceptionListType,
    NamespaceType,
    SortOrder,
)


class _ListModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- Records ------------------------------------------------------------------

class ExceptionList(_ListModel):
    """A named container of exception list items."""
    id: str
    list_id: str
    name: str
    description: str
    type: ExceptionListType
    namespace_type: NamespaceType
    tags: list[str] = Field(default_factory=list)
    system_tags: list[str] = Field(default_factory=list, alias="_tags")
    meta: dict[str, Any] | None = None
    created_at: str
    created_by: str
    updated_at: str
    updated_by: str
    tie_breaker_id: str


class ExceptionListItem(_ListModel):
    """A stored exception list item, as returned by the list client."""
    id: str
    item_id: str
    list_id: str
    type: ExceptionListItemType = ExceptionListItemType.SIMPLE
    name: str
    description: str
    entries: list[dict[str, Any]] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    system_tags: list[str] = Field(default_factory=list, alias="_tags")
    namespace_type: NamespaceType
    meta: dict[str, Any] | None = None
    comments: list[dict[str, Any]] = Field(default_factory=list)
    created_at: str
    created_by: str
    updated_at: str
    updated_by: str
    tie_breaker_id: str


class FoundExceptionListItems(BaseModel):
    """One page of list items plus the unpaged total."""
    data: list[ExceptionListItem]
    page: int
    per_page: int
    total: int


# --- Operation options --------------------------------------------------------

class FindExceptionListItemOptions(_ListModel):
    list_id: str
    page: int | None = None
    per_page: int | None = None
    filter: str | None = None
    namespace_type: NamespaceType
    sort_field: str | None = None
    sort_order: SortOrder | None = None


class CreateExceptionListItemOptions(_ListModel):
    list_id: str
    item_id: str
    type: ExceptionListItemType
    name: str
    description: str
    entries: list[dict[str, Any]]
    tags: list[str]
    system_tags: list[str] = Field(alias="_tags")
    namespace_type: NamespaceType
    meta: dict[str, Any] | None = None
    comments: list[dict[str, Any]]


class DeleteExceptionListItemOptions(_ListModel):
    """Delete by id, or by item_id when id is None."""
    id: str | None = None
    item_id: str | None = None
    namespace_type: NamespaceType
