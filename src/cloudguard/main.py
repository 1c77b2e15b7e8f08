"""FastAPI application factory with lifespan startup/shutdown."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from cloudguard.api.errors import install_error_handlers
from cloudguard.api.routes import alerts, audit, health
from cloudguard.config import AppConfig, LoggingConfig, load_config
from cloudguard.lifecycle.engine import AlertLifecycleEngine
from cloudguard.store.alerts import MongoAlertRepository
from cloudguard.store.audit import MongoAuditSink
from cloudguard.store.client import get_database, get_motor_client
from cloudguard.store.memory import InMemoryAlertRepository, InMemoryAuditSink

LOGGER = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig) -> None:
    logging.basicConfig(level=config.level, format=config.format)


async def _build_engine(app: FastAPI, config: AppConfig) -> AlertLifecycleEngine:
    if config.storage_backend == "memory":
        LOGGER.warning("Using in-memory storage; alerts will not survive a restart")
        return AlertLifecycleEngine(InMemoryAlertRepository(), InMemoryAuditSink())

    client = get_motor_client(config.mongo)
    db = get_database(client, config.mongo.db_name)
    repository = MongoAlertRepository(db, config.mongo.alerts_collection)
    audit_sink = MongoAuditSink(db, config.mongo.audit_collection)

    # Ensure indexes exist (idempotent)
    await repository.ensure_indexes()
    await audit_sink.ensure_indexes()

    app.state.mongo_client = client
    LOGGER.info("Connected to MongoDB database %s", config.mongo.db_name)
    return AlertLifecycleEngine(repository, audit_sink)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create shared resources on startup; close them on shutdown."""
    config = load_config()
    configure_logging(config.logging)

    app.state.config = config
    app.state.engine = await _build_engine(app, config)

    yield

    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="CloudGuard Alert Management",
        version="0.1.0",
        lifespan=lifespan,
    )
    install_error_handlers(app)
    app.include_router(health.router)
    app.include_router(alerts.router)
    app.include_router(audit.router)
    return app


app = create_app()
