"""Shared fixtures: fake driver, pool and on-disk credential files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import certifi
import pytest
from sqlalchemy.pool import QueuePool

from db.connection import create_pool
from db.credentials import PEM_BLOCK
from db.tls import clear_tls_profiles
from tests.fakes import FakeDriver


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def pool(driver: FakeDriver) -> Iterator[QueuePool]:
    pool = create_pool("dbname=test", connect=driver.connect)
    yield pool
    pool.dispose()


@pytest.fixture(autouse=True)
def _reset_tls_profiles():
    yield
    clear_tls_profiles()


@pytest.fixture
def pem_file(tmp_path: Path) -> Path:
    bundle = Path(certifi.where()).read_text(encoding="ascii", errors="ignore")
    path = tmp_path / "rds-ca-root.pem"
    path.write_text(PEM_BLOCK.search(bundle).group(0) + "\n", encoding="ascii")
    return path


@pytest.fixture
def db_source_file(tmp_path: Path) -> Path:
    path = tmp_path / "db-connection.yml"
    path.write_text(
        "host: db.internal\n"
        "port: \"5432\"\n"
        "user: speaker_ro\n"
        "password: s3cr3t\n"
        "database: conference\n",
        encoding="utf-8",
    )
    return path
