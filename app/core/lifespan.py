"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (logging, Redis,
permission cache, audit recorder, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.cache import CacheService, build_permission_cache
from app.infrastructure.persistence.database import dispose_engine
from app.infrastructure.services import AuditRecorder
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, Redis cache (if enabled), permission cache,
    audit recorder. Shutdown order: drain pending audit writes, cache
    disconnect, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.redis_enabled:
        cache = CacheService()
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    app.state.permission_cache = build_permission_cache(settings, app.state.cache)
    app.state.audit_recorder = AuditRecorder()
    logger.info(
        "Permission cache ready (%s, ttl=%ss)",
        type(app.state.permission_cache).__name__,
        settings.cache_ttl_permissions,
    )

    yield

    # ---- Shutdown ----
    recorder = getattr(app.state, "audit_recorder", None)
    if recorder is not None and recorder.pending:
        logger.info("Waiting for %d pending audit writes", recorder.pending)
        await recorder.drain()

    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")

    await dispose_engine()
    logger.info("Database engine disposed")
