import logging

from fastapi import Request

from app.database import get_database_url
from app.storage.base import (
    DuplicatePayrollError,
    PayrollFinalizedError,
    PlumberInUseError,
    Storage,
    StorageError,
    UnknownReferenceError,
)
from app.storage.memory import MemoryStorage
from app.storage.sql import SqlStorage

logger = logging.getLogger(__name__)


def create_storage() -> Storage:
    """Pick the SQL backend when DATABASE_URL is set, memory otherwise."""
    url = get_database_url()
    if url:
        logger.info("Using SQL storage (%s)", url.split("://", 1)[0])
        return SqlStorage.from_url(url)
    logger.info("DATABASE_URL not set; using in-memory storage")
    return MemoryStorage()


def get_storage(request: Request) -> Storage:
    """Dependency for FastAPI routes to get the configured storage."""
    return request.app.state.storage


__all__ = [
    "Storage",
    "MemoryStorage",
    "SqlStorage",
    "StorageError",
    "UnknownReferenceError",
    "PayrollFinalizedError",
    "PlumberInUseError",
    "DuplicatePayrollError",
    "create_storage",
    "get_storage",
]
