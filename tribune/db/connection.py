"""Postgres connection pool shared by the store."""

import os
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

_connection_pool: Optional[ConnectionPool] = None


def build_conninfo(config: Dict[str, Any]) -> str:
    """Build a libpq connection string from the ``postgres`` config section.

    A password named by ``password_env`` takes precedence over an inline one.
    """
    password = config.get("password") or ""
    if config.get("password_env"):
        password = os.environ.get(config["password_env"], password)

    return make_conninfo(
        host=config.get("host", "localhost"),
        port=config.get("port", 5432),
        dbname=config.get("database", "tribune"),
        user=config.get("user", "tribune"),
        password=password or None,
    )


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create the process-wide pool."""
    global _connection_pool
    if _connection_pool is None:
        _connection_pool = ConnectionPool(
            build_conninfo(config),
            min_size=1,
            max_size=10,
            kwargs={"row_factory": dict_row},
            open=True,
        )
    return _connection_pool


def close_connection_pool() -> None:
    """Close the shared pool if it was opened."""
    global _connection_pool
    if _connection_pool is not None:
        _connection_pool.close()
        _connection_pool = None


@contextmanager
def get_connection(config: Dict[str, Any]) -> Generator[psycopg.Connection, None, None]:
    """Borrow a connection from the pool."""
    pool = get_connection_pool(config)
    with pool.connection() as conn:
        yield conn
