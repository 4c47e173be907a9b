"""List Bootstrap — makes sure the trusted apps exception list exists before use.

Invariants:
    - per_request mode calls create_trusted_apps_list on every ensure()
    - once mode makes at most one successful creation call per process
    - A failed creation is never memoized; the next ensure() retries it

Design Decisions:
    - asyncio.Lock guards the once path: concurrent first requests share one call
    - Mode comes from settings so deployments can skip the per-request round-trip
"""

import asyncio
import logging
from typing import Literal

from trustgate.core.list_client_protocol import ExceptionListClient

logger = logging.getLogger(__name__)

BootstrapMode = Literal["per_request", "once"]


class TrustedAppsListBootstrap:
    """Idempotent initialization of the trusted apps list."""

    def __init__(self, mode: BootstrapMode = "per_request"):
        self.mode = mode
        self._created = False
        self._lock = asyncio.Lock()

    @property
    def created(self) -> bool:
        return self._created

    async def ensure(self, client: ExceptionListClient) -> None:
        if self.mode == "per_request":
            await client.create_trusted_apps_list()
            return
        if self._created:
            return
        async with self._lock:
            if self._created:
                return
            await client.create_trusted_apps_list()
            self._created = True
            logger.info("Trusted apps list ensured (memoized for process lifetime)")
