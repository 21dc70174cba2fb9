"""Storage for Tribune."""

from typing import Any, Dict

from .articles import ArticleRepository
from .categories import CategoryRepository
from .connection import get_connection, get_connection_pool
from .init import init_database, validate_connection
from .memory import MemoryStore
from .postgres import PostgresStore
from .runs import RunReportRepository
from .sources import SourceRepository
from .store import DocumentNotFoundError, DocumentStore, Filter


def create_store(backend: str, db_config: Dict[str, Any]) -> DocumentStore:
    """Build the configured store backend."""
    if backend == "memory":
        return MemoryStore()
    if backend == "postgres":
        return PostgresStore(db_config)
    raise ValueError(f"Unknown store backend: {backend}")


__all__ = [
    "ArticleRepository",
    "CategoryRepository",
    "DocumentNotFoundError",
    "DocumentStore",
    "Filter",
    "MemoryStore",
    "PostgresStore",
    "RunReportRepository",
    "SourceRepository",
    "create_store",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
