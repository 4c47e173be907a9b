"""Trusted App Schemas — request/response contracts of the trusted apps API.

Invariants:
    - NewTrustedApp.name is non-empty; description is at most 256 chars
    - Every entry has a non-empty field and value
    - TrustedApp.os is "unknown" only when the stored item carries no os: tag
    - List responses carry stored items unprojected; only create returns a TrustedApp

Design Decisions:
    - One model per operation (list query, create body, delete params, responses)
      instead of loose dicts: FastAPI validates input and documents output
"""

from typing import Literal

from pydantic import BaseModel, Field

from trustgate.core.domain_types import EntryOperator, EntryType, OperatingSystem
from trustgate.schemas.exception_list import FoundExceptionListItems


class TrustedAppEntry(BaseModel):
    """A single match condition on a process field."""
    field: str = Field(min_length=1)
    type: EntryType
    operator: EntryOperator
    value: str = Field(min_length=1)


class NewTrustedApp(BaseModel):
    """Create payload — POST body."""
    name: str = Field(min_length=1)
    description: str = Field("", max_length=256)
    os: OperatingSystem
    entries: list[TrustedAppEntry]


class TrustedApp(BaseModel):
    """A persisted trusted app as seen by API clients."""
    id: str
    name: str
    description: str
    os: OperatingSystem | Literal["unknown"]
    entries: list[TrustedAppEntry]
    created_at: str
    created_by: str


# --- List ---------------------------------------------------------------------

class GetTrustedAppsListRequest(BaseModel):
    page: int = Field(1, ge=1)
    per_page: int = Field(20, ge=1)
    filter: str | None = None


class GetTrustedAppsListResponse(FoundExceptionListItems):
    """The list client's page, returned as stored (items keep their _tags)."""


# --- Create -------------------------------------------------------------------

class PostTrustedAppCreateResponse(BaseModel):
    data: TrustedApp


# --- Delete -------------------------------------------------------------------

class DeleteTrustedAppsRequestParams(BaseModel):
    id: str = Field(min_length=1)


# --- Summary ------------------------------------------------------------------

class GetTrustedAppsSummaryResponse(BaseModel):
    """Trusted app counts per operating system."""
    total: int = 0
    windows: int = 0
    macos: int = 0
    linux: int = 0
