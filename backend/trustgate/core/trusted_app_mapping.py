"""Trusted App Mapping — pure projection between trusted apps and exception list items.

Invariants:
    - os is stored only as an "os:<value>" entry in the item's _tags
    - New items always go to ENDPOINT_TRUSTED_APPS_LIST_ID in the agnostic namespace
    - name, description and entries are copied verbatim in both directions

Design Decisions:
    - item_id factory injected (default uuid4): keeps the function deterministic in tests
    - Unknown os tags project to "unknown" instead of failing the whole list page
"""

import uuid
from typing import Callable

from trustgate.core.domain_types import (
    ENDPOINT_TRUSTED_APPS_LIST_ID,
    OS_TAG_PREFIX,
    TRUSTED_APPS_NAMESPACE_TYPE,
    UNKNOWN_OS,
    ExceptionListItemType,
    ItemId,
    OperatingSystem,
)
from trustgate.schemas.exception_list import (
    CreateExceptionListItemOptions,
    ExceptionListItem,
)
from trustgate.schemas.trusted_apps import NewTrustedApp, TrustedApp


def _new_item_id() -> ItemId:
    return ItemId(str(uuid.uuid4()))


def os_to_tag(os: OperatingSystem) -> str:
    return f"{OS_TAG_PREFIX}{os.value}"


def os_from_tags(tags: list[str]) -> OperatingSystem | str:
    """First os: tag wins. Values outside OperatingSystem decode to "unknown"."""
    for tag in tags:
        if tag.startswith(OS_TAG_PREFIX):
            try:
                return OperatingSystem(tag[len(OS_TAG_PREFIX):])
            except ValueError:
                return UNKNOWN_OS
    return UNKNOWN_OS


def new_trusted_app_to_create_options(
    new_app: NewTrustedApp,
    item_id_factory: Callable[[], ItemId] = _new_item_id,
) -> CreateExceptionListItemOptions:
    """Map a create payload to the list client's item creation request."""
    return CreateExceptionListItemOptions(
        list_id=ENDPOINT_TRUSTED_APPS_LIST_ID,
        item_id=item_id_factory(),
        type=ExceptionListItemType.SIMPLE,
        name=new_app.name,
        description=new_app.description,
        entries=[entry.model_dump(mode="json") for entry in new_app.entries],
        tags=[],
        system_tags=[os_to_tag(new_app.os)],
        namespace_type=TRUSTED_APPS_NAMESPACE_TYPE,
        meta=None,
        comments=[],
    )


def exception_item_to_trusted_app(item: ExceptionListItem) -> TrustedApp:
    """Project a stored item back into the trusted app response shape."""
    return TrustedApp(
        id=item.id,
        name=item.name,
        description=item.description,
        os=os_from_tags(item.system_tags),
        entries=item.entries,
        created_at=item.created_at,
        created_by=item.created_by,
    )
