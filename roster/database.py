"""Database client and handle management."""

import logging
from functools import lru_cache

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from roster.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_client() -> MongoClient:
    """Get the shared, pooled MongoDB client.

    The client connects lazily, so creating it never blocks on the server.
    """
    settings = get_settings()
    return MongoClient(
        settings.mongo_url,
        username=settings.mongo_username,
        password=settings.mongo_password,
        maxPoolSize=settings.mongo_max_pool_size,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        connectTimeoutMS=settings.mongo_timeout_ms,
        tz_aware=True,
    )


def get_db() -> Database:
    """Dependency that provides the application database handle."""
    return get_client()[get_settings().mongo_database]


def init_db(db: Database) -> None:
    """Create the indexes the collections rely on."""
    # Import here so record schemas are only loaded when needed
    from roster.models import USER_SCHEMA

    db[USER_SCHEMA.collection].create_index([("email", ASCENDING)], unique=True)
    logger.info(f"Indexes ensured on database '{db.name}'")
