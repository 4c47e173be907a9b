"""SQL Exception List Client — relational implementation of the ExceptionListClient protocol.

Invariants:
    - create_trusted_apps_list is idempotent, including under a concurrent insert race
    - find returns None when the list does not exist, otherwise a page + unpaged total
    - filter is a case-insensitive substring match on name or description
    - delete looks up by id first, then by item_id, always within the namespace
    - Writes commit before returning; the caller's session is otherwise untouched

Design Decisions:
    - Sort fields whitelisted: arbitrary column names never reach the query
    - Timestamps serialized as UTC ISO-8601 with millisecond precision and a Z suffix,
      matching the list API's wire format
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trustgate.core.domain_types import (
    ENDPOINT_TRUSTED_APPS_LIST_DESCRIPTION,
    ENDPOINT_TRUSTED_APPS_LIST_ID,
    ENDPOINT_TRUSTED_APPS_LIST_NAME,
    TRUSTED_APPS_NAMESPACE_TYPE,
    ExceptionListType,
    NamespaceType,
    SortOrder,
)
from trustgate.core.errors import DuplicateItemError
from trustgate.models.exception_list import (
    ExceptionList as ExceptionListRow,
    ExceptionListItem as ExceptionListItemRow,
)
from trustgate.schemas.exception_list import (
    CreateExceptionListItemOptions,
    DeleteExceptionListItemOptions,
    ExceptionList,
    ExceptionListItem,
    FindExceptionListItemOptions,
    FoundExceptionListItems,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20

_SORT_COLUMNS = {
    "name": ExceptionListItemRow.name,
    "created_at": ExceptionListItemRow.created_at,
    "updated_at": ExceptionListItemRow.updated_at,
}


class SqlExceptionListClient:
    """Exception list store backed by an AsyncSession."""

    def __init__(self, db: AsyncSession, user: str):
        self.db = db
        self.user = user

    async def create_trusted_apps_list(self) -> ExceptionList:
        existing = await self._get_list(
            ENDPOINT_TRUSTED_APPS_LIST_ID, TRUSTED_APPS_NAMESPACE_TYPE,
        )
        if existing is not None:
            return _list_to_schema(existing)

        now = _utcnow()
        row = ExceptionListRow(
            list_id=ENDPOINT_TRUSTED_APPS_LIST_ID,
            name=ENDPOINT_TRUSTED_APPS_LIST_NAME,
            description=ENDPOINT_TRUSTED_APPS_LIST_DESCRIPTION,
            type=ExceptionListType.ENDPOINT.value,
            namespace_type=TRUSTED_APPS_NAMESPACE_TYPE.value,
            tags=[],
            system_tags=[],
            meta=None,
            created_at=now,
            created_by=self.user,
            updated_at=now,
            updated_by=self.user,
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            # Another request created the list between our read and insert
            await self.db.rollback()
            existing = await self._get_list(
                ENDPOINT_TRUSTED_APPS_LIST_ID, TRUSTED_APPS_NAMESPACE_TYPE,
            )
            if existing is None:
                raise
            return _list_to_schema(existing)
        logger.info(
            "Trusted apps list created",
            extra={"list_id": ENDPOINT_TRUSTED_APPS_LIST_ID},
        )
        return _list_to_schema(row)

    async def find_exception_list_item(
        self, options: FindExceptionListItemOptions,
    ) -> FoundExceptionListItems | None:
        if await self._get_list(options.list_id, options.namespace_type) is None:
            return None

        page = options.page or DEFAULT_PAGE
        per_page = options.per_page or DEFAULT_PER_PAGE

        query = select(ExceptionListItemRow).where(
            ExceptionListItemRow.list_id == options.list_id,
            ExceptionListItemRow.namespace_type == options.namespace_type.value,
        )
        if options.filter:
            pattern = f"%{_escape_like(options.filter)}%"
            query = query.where(or_(
                ExceptionListItemRow.name.ilike(pattern, escape="\\"),
                ExceptionListItemRow.description.ilike(pattern, escape="\\"),
            ))

        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery()),
        )).scalar_one()

        column = _SORT_COLUMNS.get(
            options.sort_field or "", ExceptionListItemRow.created_at,
        )
        ordering = column.desc() if options.sort_order == SortOrder.DESC else column.asc()
        query = (
            query.order_by(ordering, ExceptionListItemRow.tie_breaker_id)
            .limit(per_page)
            .offset((page - 1) * per_page)
        )
        rows = (await self.db.execute(query)).scalars().all()

        return FoundExceptionListItems(
            data=[_item_to_schema(row) for row in rows],
            page=page,
            per_page=per_page,
            total=total,
        )

    async def create_exception_list_item(
        self, options: CreateExceptionListItemOptions,
    ) -> ExceptionListItem:
        if await self._get_item_by_item_id(options.item_id, options.namespace_type):
            raise DuplicateItemError(options.item_id)

        now = _utcnow()
        row = ExceptionListItemRow(
            item_id=options.item_id,
            list_id=options.list_id,
            type=options.type.value,
            name=options.name,
            description=options.description,
            entries=options.entries,
            tags=options.tags,
            system_tags=options.system_tags,
            namespace_type=options.namespace_type.value,
            meta=options.meta,
            comments=options.comments,
            created_at=now,
            created_by=self.user,
            updated_at=now,
            updated_by=self.user,
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateItemError(options.item_id)
        return _item_to_schema(row)

    async def delete_exception_list_item(
        self, options: DeleteExceptionListItemOptions,
    ) -> ExceptionListItem | None:
        if options.id is not None:
            row = await self._get_item_by_id(options.id, options.namespace_type)
        elif options.item_id is not None:
            row = await self._get_item_by_item_id(options.item_id, options.namespace_type)
        else:
            row = None
        if row is None:
            return None

        deleted = _item_to_schema(row)
        await self.db.delete(row)
        await self.db.commit()
        logger.info(
            "Exception list item deleted",
            extra={"list_id": deleted.list_id, "item_id": deleted.item_id},
        )
        return deleted

    # --- lookups --------------------------------------------------------------

    async def _get_list(
        self, list_id: str, namespace_type: NamespaceType,
    ) -> ExceptionListRow | None:
        result = await self.db.execute(
            select(ExceptionListRow).where(
                ExceptionListRow.list_id == list_id,
                ExceptionListRow.namespace_type == namespace_type.value,
            ),
        )
        return result.scalar_one_or_none()

    async def _get_item_by_id(
        self, id: str, namespace_type: NamespaceType,
    ) -> ExceptionListItemRow | None:
        result = await self.db.execute(
            select(ExceptionListItemRow).where(
                ExceptionListItemRow.id == id,
                ExceptionListItemRow.namespace_type == namespace_type.value,
            ),
        )
        return result.scalar_one_or_none()

    async def _get_item_by_item_id(
        self, item_id: str, namespace_type: NamespaceType,
    ) -> ExceptionListItemRow | None:
        result = await self.db.execute(
            select(ExceptionListItemRow).where(
                ExceptionListItemRow.item_id == item_id,
                ExceptionListItemRow.namespace_type == namespace_type.value,
            ),
        )
        return result.scalar_one_or_none()


# --- row -> schema ------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_iso(value: datetime) -> str:
    """UTC ISO-8601, e.g. 2020-04-20T15:25:31.830Z. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _list_to_schema(row: ExceptionListRow) -> ExceptionList:
    return ExceptionList(
        id=row.id,
        list_id=row.list_id,
        name=row.name,
        description=row.description,
        type=row.type,
        namespace_type=row.namespace_type,
        tags=list(row.tags or []),
        system_tags=list(row.system_tags or []),
        meta=row.meta,
        created_at=_to_iso(row.created_at),
        created_by=row.created_by,
        updated_at=_to_iso(row.updated_at),
        updated_by=row.updated_by,
        tie_breaker_id=row.tie_breaker_id,
    )


def _item_to_schema(row: ExceptionListItemRow) -> ExceptionListItem:
    return ExceptionListItem(
        id=row.id,
        item_id=row.item_id,
        list_id=row.list_id,
        type=row.type,
        name=row.name,
        description=row.description,
        entries=list(row.entries or []),
        tags=list(row.tags or []),
        system_tags=list(row.system_tags or []),
        namespace_type=row.namespace_type,
        meta=row.meta,
        comments=list(row.comments or []),
        created_at=_to_iso(row.created_at),
        created_by=row.created_by,
        updated_at=_to_iso(row.updated_at),
        updated_by=row.updated_by,
        tie_breaker_id=row.tie_breaker_id,
    )
