"""Trusted Apps Routes — list, create, delete and summarize endpoint trusted apps.

Invariants:
    - Every failure is logged exactly once on the "trusted_apps" channel, then 500
    - 500 bodies carry a generic INTERNAL_ERROR envelope, never the raw exception
    - Delete of a missing item is 404 and is not logged as an error
    - Request validation (400) happens before any list client call

Design Decisions:
    - Errors caught here instead of the global handlers: the channel and the
      single log call are part of this API's contract
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from trustgate.api.dependencies import get_trusted_apps_service
from trustgate.core.domain_types import ENDPOINT_TRUSTED_APPS_LIST_ID
from trustgate.core.errors import (
    ErrorContext,
    InternalServerError,
    ResourceNotFoundError,
    TrustgateError,
)
from trustgate.infrastructure.observability import error_log_extra
from trustgate.schemas.trusted_apps import (
    DeleteTrustedAppsRequestParams,
    GetTrustedAppsListRequest,
    GetTrustedAppsListResponse,
    GetTrustedAppsSummaryResponse,
    NewTrustedApp,
    PostTrustedAppCreateResponse,
)
from trustgate.services.trusted_apps_service import TrustedAppsService

TRUSTED_APPS_LOGGER = "trusted_apps"

TRUSTED_APPS_LIST_API = "/api/endpoint/trusted_apps"
TRUSTED_APPS_CREATE_API = "/api/endpoint/trusted_apps"
TRUSTED_APPS_DELETE_API = "/api/endpoint/trusted_apps/{app_id}"
TRUSTED_APPS_SUMMARY_API = "/api/endpoint/trusted_apps/summary"

logger = logging.getLogger(TRUSTED_APPS_LOGGER)
router = APIRouter(prefix=TRUSTED_APPS_LIST_API, tags=["trusted-apps"])


def _error_response(exc: TrustgateError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _internal_error(operation: str, exc: Exception) -> JSONResponse:
    """Log the failure once and hide it behind a generic 500."""
    error = InternalServerError(ErrorContext(list_id=ENDPOINT_TRUSTED_APPS_LIST_ID))
    logger.error(
        f"Trusted apps {operation} failed: {exc}",
        exc_info=True,
        extra=error_log_extra(error, operation=operation),
    )
    return _error_response(error)


@router.get("", response_model=GetTrustedAppsListResponse)
async def get_trusted_apps_list(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1),
    filter_: str | None = Query(None, alias="filter"),
    service: TrustedAppsService = Depends(get_trusted_apps_service),
):
    """List trusted apps, sorted by name."""
    request = GetTrustedAppsListRequest(
        page=page, per_page=per_page, filter=filter_,
    )
    try:
        return await service.list_trusted_apps(request)
    except Exception as e:
        return _internal_error("list", e)


@router.get("/summary", response_model=GetTrustedAppsSummaryResponse)
async def get_trusted_apps_summary(
    service: TrustedAppsService = Depends(get_trusted_apps_service),
):
    """Count trusted apps per operating system."""
    try:
        return await service.get_summary()
    except Exception as e:
        return _internal_error("summary", e)


@router.post("", response_model=PostTrustedAppCreateResponse)
async def create_trusted_app(
    body: NewTrustedApp,
    service: TrustedAppsService = Depends(get_trusted_apps_service),
):
    """Create a trusted app."""
    try:
        return await service.create_trusted_app(body)
    except Exception as e:
        return _internal_error("create", e)


@router.delete("/{app_id}")
async def delete_trusted_app(
    app_id: str,
    service: TrustedAppsService = Depends(get_trusted_apps_service),
):
    """Delete a trusted app by its stored id."""
    try:
        await service.delete_trusted_app(DeleteTrustedAppsRequestParams(id=app_id))
    except ResourceNotFoundError as e:
        return _error_response(e)
    except Exception as e:
        return _internal_error("delete", e)
    return Response(status_code=status.HTTP_200_OK)
