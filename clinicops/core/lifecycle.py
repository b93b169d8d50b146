"""
Application lifecycle management using the FastAPI lifespan pattern.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from clinicops.config.settings import Settings, get_settings
from clinicops.core.container import get_container
from clinicops.database.async_db import dispose_engine

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Startup checks and graceful shutdown.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._initialized = False

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")
        self._verify_configurations()
        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")
        await dispose_engine()
        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Fail fast on a broken slot catalog; warn about optional integrations."""
        catalog = get_container().get_slot_catalog()
        logger.info(
            f"Scheduling: {len(catalog.slots)} slots, slot clock UTC{self._settings.SLOT_CLOCK_UTC_OFFSET_HOURS:+d}, "
            f"shift offset {self._settings.SHIFT_UTC_OFFSET_HOURS}h, cutoff {self._settings.SHIFT_CUTOFF_HOUR}:00"
        )
        if not self._settings.meeting_enabled:
            logger.warning("VideoSDK is not configured")
        if not self._settings.SMTP_SERVER:
            logger.warning("SMTP is not configured")


_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    manager = get_lifecycle_manager()
    await manager.startup()
    try:
        yield
    finally:
        await manager.shutdown()
