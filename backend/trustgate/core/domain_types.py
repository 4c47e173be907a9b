"""Domain Types — enums and constants shared by the mapper, schemas and list client.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - ENDPOINT_TRUSTED_APPS_LIST_ID is the only list trusted apps are stored in
    - Trusted apps always live in the agnostic namespace

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - NewType for identifiers: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ListId = NewType("ListId", str)
ItemId = NewType("ItemId", str)


# ─── Enums ───────────────────────────────────────────────────────

class OperatingSystem(str, Enum):
    """Operating systems a trusted app can target."""
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"


class EntryOperator(str, Enum):
    """Whether a match entry includes or excludes matching processes."""
    INCLUDED = "included"
    EXCLUDED = "excluded"


class EntryType(str, Enum):
    """How a match entry compares its single value against the field."""
    MATCH = "match"
    EXACT = "exact"
    WILDCARD = "wildcard"


class NamespaceType(str, Enum):
    """Scope of an exception list: one space or every space."""
    SINGLE = "single"
    AGNOSTIC = "agnostic"


class ExceptionListType(str, Enum):
    """Kind of exception list container."""
    DETECTION = "detection"
    ENDPOINT = "endpoint"


class ExceptionListItemType(str, Enum):
    """Kind of exception list item. Trusted apps are always simple."""
    SIMPLE = "simple"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─── Trusted Apps List ───────────────────────────────────────────

ENDPOINT_TRUSTED_APPS_LIST_ID = ListId("endpoint_trusted_apps")
ENDPOINT_TRUSTED_APPS_LIST_NAME = "Elastic Endpoint Security Trusted Apps List"
ENDPOINT_TRUSTED_APPS_LIST_DESCRIPTION = "Elastic Endpoint Security Trusted Apps List"

TRUSTED_APPS_NAMESPACE_TYPE = NamespaceType.AGNOSTIC

OS_TAG_PREFIX = "os:"
UNKNOWN_OS = "unknown"
