"""PyYAML loader → typed config dataclasses."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

StorageBackend = Literal["mongo", "memory"]


@dataclass
class MongoConfig:
    uri: str = "mongodb://localhost:27017"
    db_name: str = "cloudguard"
    alerts_collection: str = "alerts"
    audit_collection: str = "audit_logs"
    max_pool_size: int = 10
    min_pool_size: int = 2
    server_selection_timeout_ms: int = 5000
    socket_timeout_ms: int = 45000


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class AppConfig:
    storage_backend: StorageBackend = "mongo"
    mongo: MongoConfig = field(default_factory=MongoConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load cloudguard.yaml and return a typed AppConfig.

    Falls back to defaults if the file is absent or a section is missing.
    Environment variables MONGODB_URI, DB_NAME, CLOUDGUARD_STORAGE and
    LOG_LEVEL override whatever the file says.
    """
    raw: dict = {}
    if path is None:
        path = Path(__file__).parent.parent.parent / "config" / "cloudguard.yaml"

    resolved = Path(path)
    if resolved.exists():
        with resolved.open() as f:
            raw = yaml.safe_load(f) or {}

    mongo_raw = raw.get("mongo", {})
    logging_raw = raw.get("logging", {})
    defaults = MongoConfig()

    storage_backend = os.getenv("CLOUDGUARD_STORAGE", raw.get("storage_backend", "mongo"))
    if storage_backend not in ("mongo", "memory"):
        raise ValueError(
            f"Invalid storage_backend: {storage_backend}. Must be one of: mongo, memory"
        )

    return AppConfig(
        storage_backend=storage_backend,
        mongo=MongoConfig(
            uri=os.getenv("MONGODB_URI", mongo_raw.get("uri", defaults.uri)),
            db_name=os.getenv("DB_NAME", mongo_raw.get("db_name", defaults.db_name)),
            alerts_collection=mongo_raw.get("alerts_collection", defaults.alerts_collection),
            audit_collection=mongo_raw.get("audit_collection", defaults.audit_collection),
            max_pool_size=mongo_raw.get("max_pool_size", defaults.max_pool_size),
            min_pool_size=mongo_raw.get("min_pool_size", defaults.min_pool_size),
            server_selection_timeout_ms=mongo_raw.get(
                "server_selection_timeout_ms", defaults.server_selection_timeout_ms
            ),
            socket_timeout_ms=mongo_raw.get("socket_timeout_ms", defaults.socket_timeout_ms),
        ),
        logging=LoggingConfig(
            level=os.getenv("LOG_LEVEL", logging_raw.get("level", "INFO")).upper(),
            format=logging_raw.get("format", LoggingConfig.format),
        ),
    )
