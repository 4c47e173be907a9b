"""Boundary Protocol — contract between the trusted apps core and the exception list store.

Invariants:
    - Core NEVER imports the concrete client — dependency arrows point inward only
    - find/delete return None when the list or item does not exist (not an exception)
    - create_trusted_apps_list is idempotent: calling it on an existing list is a no-op

Design Decisions:
    - Protocol over ABC: structural subtyping, so test doubles need no inheritance
    - Async in Protocol: implementations do IO; the mapping around them stays pure
"""

from typing import Protocol

from trustgate.schemas.exception_list import (
    CreateExceptionListItemOptions,
    DeleteExceptionListItemOptions,
    ExceptionList,
    ExceptionListItem,
    FindExceptionListItemOptions,
    FoundExceptionListItems,
)


class ExceptionListClient(Protocol):
    """Contract for exception list persistence — implemented by infrastructure."""
    async def create_trusted_apps_list(self) -> ExceptionList: ...

    async def find_exception_list_item(
        self, options: FindExceptionListItemOptions,
    ) -> FoundExceptionListItems | None: ...

    async def create_exception_list_item(
        self, options: CreateExceptionListItemOptions,
    ) -> ExceptionListItem: ...

    async def delete_exception_list_item(
        self, options: DeleteExceptionListItemOptions,
    ) -> ExceptionListItem | None: ...
