"""Tests for the connection pool and its initialization."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import psycopg2
import pytest
from psycopg2 import extensions
from sqlalchemy.pool import QueuePool

from db import credentials
from db.connection import build_dsn, close_pool, create_pool, initialize
from db.errors import DBConnectionError
from db.tls import get_tls_profile, register_tls_profile
from repositories.personality_repo import PersonalityRepository
from tests.fakes import SEED_ROWS, FakeDriver


def test_connect_opens_autocommit_connection(pool: QueuePool, driver: FakeDriver) -> None:
    conn = pool.connect()

    assert conn.dbapi_connection.autocommit is True
    assert conn.dbapi_connection.dsn == "dbname=test"
    assert pool.checkedout() == 1
    conn.close()


def test_returned_connection_is_reused(pool: QueuePool, driver: FakeDriver) -> None:
    first = pool.connect()
    raw = first.dbapi_connection
    first.close()

    second = pool.connect()

    assert second.dbapi_connection is raw
    assert len(driver.connections) == 1
    second.close()


def test_connection_past_its_lifetime_is_replaced(driver: FakeDriver) -> None:
    pool = create_pool("dbname=test", max_lifetime=0.05, connect=driver.connect)
    first = pool.connect()
    raw = first.dbapi_connection
    first.close()
    time.sleep(0.1)

    second = pool.connect()

    assert second.dbapi_connection is not raw
    assert raw.closed
    assert driver.live == 1
    second.close()


def test_idle_connections_never_exceed_open_limit(driver: FakeDriver) -> None:
    pool = create_pool("dbname=test", max_open=3, connect=driver.connect)
    conns = [pool.connect() for _ in range(3)]

    for conn in conns:
        conn.close()

    assert pool.checkedin() == 3
    assert driver.live == 3


def test_failed_connect_frees_the_slot(driver: FakeDriver) -> None:
    pool = create_pool("dbname=test", max_open=1, connect=driver.connect)
    driver.connect_error = psycopg2.OperationalError("could not connect")

    with pytest.raises(psycopg2.OperationalError):
        pool.connect()

    driver.connect_error = None
    conn = pool.connect()
    assert conn.dbapi_connection is not None
    conn.close()


def test_connect_waits_for_a_free_slot(driver: FakeDriver) -> None:
    pool = create_pool("dbname=test", max_open=1, connect=driver.connect)
    held = pool.connect()
    acquired = threading.Event()

    def borrow() -> None:
        pool.connect().close()
        acquired.set()

    worker = threading.Thread(target=borrow)
    worker.start()
    assert not acquired.wait(0.1)

    held.close()
    worker.join(timeout=2)
    assert acquired.is_set()


def test_open_connections_never_exceed_limit_under_load() -> None:
    driver = FakeDriver()
    pool = create_pool("dbname=test", connect=driver.connect)
    driver.on_execute = lambda: time.sleep(0.002)
    repo = PersonalityRepository(pool)

    with ThreadPoolExecutor(max_workers=200) as executor:
        results = list(executor.map(lambda _: repo.get_all(), range(1000)))

    assert all(len(r) == len(SEED_ROWS) for r in results)
    assert 1 <= driver.peak <= 50
    assert pool.checkedout() == 0


def test_close_pool_closes_idle_connections(pool: QueuePool, driver: FakeDriver) -> None:
    pool.connect().close()

    close_pool(pool)

    assert driver.live == 0


def test_build_dsn_resolves_profile_by_name(db_source_file: Path, pem_file: Path) -> None:
    source, cert_pool = credentials.load(db_source_file, pem_file)
    register_tls_profile("custom", cert_pool)

    params = extensions.parse_dsn(build_dsn(source, "custom"))

    assert params == {
        "host": "db.internal",
        "port": "5432",
        "user": "speaker_ro",
        "password": "s3cr3t",
        "dbname": "conference",
        "sslmode": "verify-full",
        "sslrootcert": str(pem_file),
    }


def test_build_dsn_with_unregistered_profile(db_source_file: Path) -> None:
    source = credentials.load_db_source(db_source_file)

    with pytest.raises(DBConnectionError, match="Unknown TLS profile 'custom'"):
        build_dsn(source, "custom")


def test_register_tls_profile_rejects_empty_name(pem_file: Path) -> None:
    cert_pool = credentials.load_cert_pool(pem_file)

    with pytest.raises(DBConnectionError):
        register_tls_profile("", cert_pool)


def test_initialize_registers_profile_without_connecting(
    db_source_file: Path, pem_file: Path, driver: FakeDriver
) -> None:
    source, cert_pool = credentials.load(db_source_file, pem_file)

    pool = initialize(source, cert_pool, connect=driver.connect)

    assert get_tls_profile("custom").root_cert_path == str(pem_file)
    assert driver.connections == []
    assert pool.size() == 50


def test_initialize_connection_string_uses_registered_bundle(
    db_source_file: Path, pem_file: Path, driver: FakeDriver
) -> None:
    source, cert_pool = credentials.load(db_source_file, pem_file)

    pool = initialize(source, cert_pool, tls_profile_name="rds", connect=driver.connect)
    pool.connect().close()

    params = extensions.parse_dsn(driver.connections[0].dsn)
    assert params["sslrootcert"] == get_tls_profile("rds").root_cert_path
    assert params["sslmode"] == "verify-full"
