"""
handlers/personality_handler.py
-------------------------------
HTTP routes for personality records.
Delegates all data access to PersonalityRepository.
"""

import re

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from config import GREETING
from handlers.errors import ParseError
from repositories.personality_repo import PersonalityRepository

router = APIRouter()

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


def parse_personality_id(raw: str) -> int:
    """
    Parse a base-10 signed 64-bit integer.

    Raises:
        ParseError: On anything else (blanks, underscores, out of range...).
    """
    if not _DECIMAL.fullmatch(raw):
        raise ParseError(f"invalid personality id {raw!r}")
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ParseError(f"personality id {raw!r} out of range")
    return value


def get_repository(request: Request) -> PersonalityRepository:
    """Repository the application was created with."""
    return request.app.state.repository


@router.get("/", response_class=PlainTextResponse)
def index() -> str:
    return GREETING


@router.get("/personalities/{personality_id}")
def get_personality(
    personality_id: str,
    repo: PersonalityRepository = Depends(get_repository),
) -> list[dict]:
    """Zero or one personality; an unknown ID is an empty list, not a 404."""
    parsed_id = parse_personality_id(personality_id)
    return [p.to_dict() for p in repo.get_by_id(parsed_id)]


@router.get("/personalities")
def list_personalities(
    repo: PersonalityRepository = Depends(get_repository),
) -> list[dict]:
    """Every personality in the table."""
    return [p.to_dict() for p in repo.get_all()]
