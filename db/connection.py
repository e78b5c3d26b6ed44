"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.

psycopg2 opens the connections; SQLAlchemy's QueuePool bounds and recycles
them. `initialize()` turns the loaded credentials into that pool. It is
created once at startup, handed to the HTTP layer, and disposed of when the
server shuts down.
"""

from typing import Any, Callable

import psycopg2
from psycopg2 import extensions
from sqlalchemy.pool import QueuePool

from config import (
    DB_CONN_MAX_LIFETIME_SECONDS,
    DB_MAX_IDLE_CONNS,
    DB_MAX_OPEN_CONNS,
    TLS_PROFILE_NAME,
)
from db.credentials import CertificatePool
from db.errors import DBConnectionError
from db.tls import get_tls_profile, register_tls_profile
from models.db_source import DBSource
from utils.logger import get_logger

logger = get_logger(__name__)


def create_pool(
    dsn: str,
    max_open: int = DB_MAX_OPEN_CONNS,
    max_lifetime: float = DB_CONN_MAX_LIFETIME_SECONDS,
    connect: Callable[[str], Any] = psycopg2.connect,
) -> QueuePool:
    """
    Build a QueuePool of autocommit psycopg2 connections.

    Args:
        dsn: libpq connection string.
        max_open: Hard cap on open connections. Idle connections count
            toward it, so it also bounds how many are kept idle.
        max_lifetime: Seconds after which a connection is replaced on checkout.
        connect: Driver connect function.

    Returns:
        A pool whose `connect()` blocks while `max_open` connections are
        checked out.
    """

    def creator():
        conn = connect(dsn)
        conn.autocommit = True
        return conn

    return QueuePool(
        creator,
        pool_size=max_open,
        max_overflow=0,
        recycle=max_lifetime,
        timeout=None,
    )


def build_dsn(source: DBSource, tls_profile_name: str) -> str:
    """
    Build the libpq connection string for `source`, secured by the TLS
    profile registered under `tls_profile_name`.

    psycopg2 returns timestamp columns as `datetime` objects, so no extra
    option is needed for time parsing.

    Raises:
        DBConnectionError: If the profile is unknown or the driver rejects
            the resulting string.
    """
    profile = get_tls_profile(tls_profile_name)
    try:
        dsn = extensions.make_dsn(
            host=source.host,
            port=source.port,
            user=source.user,
            password=source.password,
            dbname=source.database,
            **profile.dsn_params(),
        )
        extensions.parse_dsn(dsn)
    except psycopg2.Error as e:
        raise DBConnectionError(f"Invalid connection string: {e}") from e
    return dsn


def initialize(
    source: DBSource,
    cert_pool: CertificatePool,
    tls_profile_name: str = TLS_PROFILE_NAME,
    connect: Callable[[str], Any] = psycopg2.connect,
) -> QueuePool:
    """
    Register the TLS profile and build the connection pool.

    No connection is opened here; connectivity problems surface on the
    first query.

    Args:
        source: Credentials loaded from the YAML file.
        cert_pool: CA bundle loaded from the PEM file.
        tls_profile_name: Name to register the bundle under.
        connect: Driver connect function.

    Raises:
        DBConnectionError: If TLS registration or the connection string fails.
    """
    register_tls_profile(tls_profile_name, cert_pool)
    dsn = build_dsn(source, tls_profile_name)
    pool = create_pool(dsn, connect=connect)
    logger.info(
        f"Database connection pool initialized "
        f"(max_open={pool.size()}, max_idle={min(DB_MAX_IDLE_CONNS, pool.size())}, "
        f"max_lifetime={DB_CONN_MAX_LIFETIME_SECONDS:g}s, tls={tls_profile_name})."
    )
    return pool


def close_pool(pool: QueuePool) -> None:
    """Close every idle connection in the pool."""
    pool.dispose()
    logger.info("Database connection pool closed.")
