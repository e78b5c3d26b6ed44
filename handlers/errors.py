"""
handlers/errors.py
------------------
Translates exceptions raised while serving a request into HTTP responses.
Nothing is retried; the server keeps running whatever a handler raises.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from db.errors import MappingError, QueryError
from utils.logger import get_logger

logger = get_logger(__name__)


class ParseError(ValueError):
    """A path parameter could not be parsed."""


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def parse_error_handler(request: Request, exc: ParseError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def query_error_handler(request: Request, exc: QueryError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database query failed")


async def mapping_error_handler(request: Request, exc: MappingError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Unexpected data in database")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path}: unhandled error", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on `app`."""
    app.add_exception_handler(ParseError, parse_error_handler)
    app.add_exception_handler(QueryError, query_error_handler)
    app.add_exception_handler(MappingError, mapping_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
