"""Motor async client setup.

The client is created once at app startup via FastAPI lifespan and stored
on app.state so all routes share the same connection pool.
"""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from cloudguard.config import MongoConfig


def get_motor_client(config: MongoConfig) -> AsyncIOMotorClient:  # type: ignore[type-arg]
    return AsyncIOMotorClient(
        config.uri,
        maxPoolSize=config.max_pool_size,
        minPoolSize=config.min_pool_size,
        serverSelectionTimeoutMS=config.server_selection_timeout_ms,
        socketTimeoutMS=config.socket_timeout_ms,
    )


def get_database(
    client: AsyncIOMotorClient,  # type: ignore[type-arg]
    db_name: str,
) -> AsyncIOMotorDatabase:  # type: ignore[type-arg]
    return client[db_name]
