"""Application lifespan: startup and shutdown.

Wiring only: logging, Redis cache, database bootstrap, telemetry and
engine dispose. A failed bootstrap aborts startup.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.persistence.bootstrap import bootstrap_database
from app.infrastructure.persistence.database import dispose_engine, get_engine
from app.shared.telemetry.logging import setup_logging
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, telemetry (if enabled), Redis cache (if
    enabled), database bootstrap (if enabled). Shutdown order: cache
    disconnect, telemetry shutdown, SQL engine dispose; shutdown also runs
    when a startup step raises.
    """
    settings = get_settings()
    setup_logging()

    app.state.cache = None
    try:
        # ---- Startup ----
        engine = get_engine()

        if settings.telemetry_enabled:
            telemetry = TelemetryConfig(
                service_name=settings.app_name,
                service_version=settings.app_version,
                enabled=True,
                environment=settings.telemetry_environment,
            )
            telemetry.setup_telemetry(
                exporter_type=settings.telemetry_exporter,
                otlp_endpoint=settings.telemetry_otlp_endpoint,
                sample_rate=settings.telemetry_sample_rate,
            )
            set_telemetry(telemetry)
            telemetry.instrument_fastapi(app)
            telemetry.instrument_sqlalchemy(engine)
            if settings.redis_enabled:
                telemetry.instrument_redis()
            logger.info("Telemetry initialized")

        if settings.redis_enabled:
            cache = CacheService(settings=settings)
            app.state.cache = cache
            await cache.connect()

        if settings.bootstrap_on_startup:
            await bootstrap_database(engine, settings)

        yield
    finally:
        await _shutdown(app)


async def _shutdown(app: FastAPI) -> None:
    """Release cache, telemetry and engine. Also runs when startup fails."""
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    await dispose_engine()
    logger.info("Database engine disposed")
