"""Request Dependencies — build the list client and trusted apps service per request.

Invariants:
    - One list client per request, bound to that request's DB session
    - One TrustedAppsListBootstrap per process (its memo must outlive requests)

Design Decisions:
    - get_exception_list_client is the single override point for tests and
      alternative list stores (app.dependency_overrides)
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trustgate.config import Settings, get_settings
from trustgate.core.list_client_protocol import ExceptionListClient
from trustgate.infrastructure.database import get_db
from trustgate.infrastructure.exception_list_client import SqlExceptionListClient
from trustgate.services.list_bootstrap import BootstrapMode, TrustedAppsListBootstrap
from trustgate.services.trusted_apps_service import TrustedAppsService


@lru_cache
def _bootstrap_for(mode: BootstrapMode) -> TrustedAppsListBootstrap:
    return TrustedAppsListBootstrap(mode)


def get_list_bootstrap(
    settings: Settings = Depends(get_settings),
) -> TrustedAppsListBootstrap:
    return _bootstrap_for(settings.trusted_apps_list_bootstrap)


async def get_exception_list_client(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ExceptionListClient:
    """Exception list client from request context."""
    return SqlExceptionListClient(db, user=settings.list_client_user)


def get_trusted_apps_service(
    client: ExceptionListClient = Depends(get_exception_list_client),
    bootstrap: TrustedAppsListBootstrap = Depends(get_list_bootstrap),
) -> TrustedAppsService:
    return TrustedAppsService(client, bootstrap)
