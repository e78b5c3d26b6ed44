"""
main.py
-------
Entry point for the Personality API.

Responsibilities:
    - Load the credentials and CA bundle, build the connection pool.
    - Create the FastAPI application with its routes and error handlers.
    - Serve it with uvicorn and close the pool on shutdown.
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from sqlalchemy.pool import QueuePool

from config import DB_SOURCE_FILE_PATH, PEM_FILE_PATH, SERVER_HOST, SERVER_PORT
from db import credentials
from db.connection import close_pool, initialize
from db.errors import CertError, ConfigError, DBConnectionError
from handlers.errors import register_error_handlers
from handlers.middleware import RequestLogMiddleware
from handlers.personality_handler import router as personality_router
from repositories.personality_repo import PersonalityRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def create_app(
    repository: PersonalityRepository,
    pool: Optional[QueuePool] = None,
) -> FastAPI:
    """
    Build the application around an already-constructed repository.

    Args:
        repository: Data access object used by every route.
        pool: Pool to close when the application shuts down.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if pool is not None:
            close_pool(pool)

    app = FastAPI(title="Personality API", lifespan=lifespan)
    app.state.repository = repository
    app.add_middleware(RequestLogMiddleware)
    register_error_handlers(app)
    app.include_router(personality_router)
    return app


def bootstrap(
    db_source_path: str = DB_SOURCE_FILE_PATH,
    pem_path: str = PEM_FILE_PATH,
) -> QueuePool:
    """
    Load credentials and build the connection pool.

    Raises:
        ConfigError, CertError, DBConnectionError: Startup cannot continue.
    """
    source, cert_pool = credentials.load(db_source_path, pem_path)
    return initialize(source, cert_pool)


def main() -> None:
    """Bootstrap the database and run the HTTP server."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    try:
        pool = bootstrap(DB_SOURCE_FILE_PATH, PEM_FILE_PATH)
    except (ConfigError, CertError, DBConnectionError) as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    # ── 2. Build the application ──────────────────────────
    app = create_app(PersonalityRepository(pool), pool)

    # ── 3. Serve until interrupted ────────────────────────
    logger.info(f"Personality API listening on {SERVER_HOST}:{SERVER_PORT}")
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT, log_config=None)
    logger.info("Personality API stopped.")


if __name__ == "__main__":
    main()
