"""Trusted Apps Service — list, create, delete and summarize trusted apps.

Invariants:
    - Every operation ensures the trusted apps list exists before touching items
    - Reads are sorted by name ascending within the agnostic namespace
    - List passes stored items through untouched; foreign entry shapes never fail a page
    - Delete of a missing item raises ResourceNotFoundError (never returns silently)
    - Collaborator exceptions propagate unchanged; routes decide the HTTP outcome

Design Decisions:
    - Service holds the client per request: FastAPI builds it from request context
    - Summary pages through the list instead of aggregating in the store:
      the list client contract has no aggregation operation
"""

import logging

from trustgate.core.domain_types import (
    ENDPOINT_TRUSTED_APPS_LIST_ID,
    TRUSTED_APPS_NAMESPACE_TYPE,
    OperatingSystem,
    SortOrder,
)
from trustgate.core.errors import ErrorContext, ResourceNotFoundError
from trustgate.core.list_client_protocol import ExceptionListClient
from trustgate.core.trusted_app_mapping import (
    exception_item_to_trusted_app,
    new_trusted_app_to_create_options,
    os_from_tags,
)
from trustgate.schemas.exception_list import (
    DeleteExceptionListItemOptions,
    FindExceptionListItemOptions,
)
from trustgate.schemas.trusted_apps import (
    DeleteTrustedAppsRequestParams,
    GetTrustedAppsListRequest,
    GetTrustedAppsListResponse,
    GetTrustedAppsSummaryResponse,
    NewTrustedApp,
    PostTrustedAppCreateResponse,
)
from trustgate.services.list_bootstrap import TrustedAppsListBootstrap

logger = logging.getLogger(__name__)

SUMMARY_PAGE_SIZE = 100


class TrustedAppsService:
    """Trusted apps operations over an injected exception list client."""

    def __init__(
        self,
        client: ExceptionListClient,
        bootstrap: TrustedAppsListBootstrap,
    ):
        self.client = client
        self.bootstrap = bootstrap

    async def list_trusted_apps(
        self, request: GetTrustedAppsListRequest,
    ) -> GetTrustedAppsListResponse:
        await self.bootstrap.ensure(self.client)
        results = await self.client.find_exception_list_item(
            _find_options(request.page, request.per_page, request.filter),
        )
        if results is None:
            return GetTrustedAppsListResponse(
                data=[], page=request.page, per_page=request.per_page, total=0,
            )
        return GetTrustedAppsListResponse(
            data=results.data,
            page=results.page,
            per_page=results.per_page,
            total=results.total,
        )

    async def create_trusted_app(
        self, new_app: NewTrustedApp,
    ) -> PostTrustedAppCreateResponse:
        await self.bootstrap.ensure(self.client)
        options = new_trusted_app_to_create_options(new_app)
        created = await self.client.create_exception_list_item(options)
        logger.info(
            f"Trusted app created: {created.name}",
            extra={"list_id": created.list_id, "item_id": created.item_id},
        )
        return PostTrustedAppCreateResponse(
            data=exception_item_to_trusted_app(created),
        )

    async def delete_trusted_app(
        self, params: DeleteTrustedAppsRequestParams,
    ) -> None:
        await self.bootstrap.ensure(self.client)
        deleted = await self.client.delete_exception_list_item(
            DeleteExceptionListItemOptions(
                id=params.id,
                item_id=None,
                namespace_type=TRUSTED_APPS_NAMESPACE_TYPE,
            ),
        )
        if deleted is None:
            raise ResourceNotFoundError(
                "Trusted app", params.id,
                ErrorContext(list_id=ENDPOINT_TRUSTED_APPS_LIST_ID, item_id=params.id),
            )

    async def get_summary(self) -> GetTrustedAppsSummaryResponse:
        await self.bootstrap.ensure(self.client)
        summary = GetTrustedAppsSummaryResponse()
        page = 1
        while True:
            results = await self.client.find_exception_list_item(
                _find_options(page, SUMMARY_PAGE_SIZE, None),
            )
            if results is None or not results.data:
                break
            for item in results.data:
                summary.total += 1
                os = os_from_tags(item.system_tags)
                if os == OperatingSystem.WINDOWS:
                    summary.windows += 1
                elif os == OperatingSystem.MACOS:
                    summary.macos += 1
                elif os == OperatingSystem.LINUX:
                    summary.linux += 1
            if page * SUMMARY_PAGE_SIZE >= results.total:
                break
            page += 1
        return summary


def _find_options(
    page: int, per_page: int, filter_: str | None,
) -> FindExceptionListItemOptions:
    return FindExceptionListItemOptions(
        list_id=ENDPOINT_TRUSTED_APPS_LIST_ID,
        page=page,
        per_page=per_page,
        filter=filter_,
        namespace_type=TRUSTED_APPS_NAMESPACE_TYPE,
        sort_field="name",
        sort_order=SortOrder.ASC,
    )
