"""
repositories/personality_repo.py
--------------------------------
Data access layer for personality records.
All SQL queries related to the `t_speaker` table live here.
"""

from datetime import datetime

from sqlalchemy.pool import QueuePool

from db.errors import MappingError
from db.query import RowCursor, run_query
from models.personality import Personality

_SELECT_PERSONALITIES = "SELECT id, name, mail, created, modified FROM t_speaker"

# column -> accepted python type, in SELECT order
_COLUMNS = (
    ("id", int),
    ("name", str),
    ("mail", str),
    ("created", datetime),
    ("modified", datetime),
)


def _row_to_personality(row) -> Personality:
    """Convert a DB row tuple into a Personality, checking every column."""
    if row is None or len(row) != len(_COLUMNS):
        raise MappingError(f"Expected {len(_COLUMNS)} columns, got {row!r}")
    for value, (column, expected) in zip(row, _COLUMNS):
        if isinstance(value, bool) or not isinstance(value, expected):
            raise MappingError(
                f"Column '{column}' expected {expected.__name__}, "
                f"got {type(value).__name__}"
            )
    return Personality(
        id=row[0],
        name=row[1],
        email=row[2],
        created_at=row[3],
        updated_at=row[4],
    )


def map_rows(cursor: RowCursor) -> list[Personality]:
    """
    Materialize every row of `cursor`, in the order the database returned them.

    The cursor is closed afterwards, also when a row fails to map.

    Raises:
        MappingError: If a row does not have the expected column types.
    """
    try:
        return [_row_to_personality(row) for row in cursor]
    finally:
        cursor.close()


class PersonalityRepository:
    """Repository for read operations on the t_speaker table."""

    def __init__(self, pool: QueuePool):
        self.pool = pool

    def get_by_id(self, personality_id: int) -> list[Personality]:
        """
        Fetch the personality with the given ID.

        Returns:
            A list with zero or one Personality.
        """
        sql = f"{_SELECT_PERSONALITIES} WHERE id = %s"
        cursor = run_query(self.pool, sql, "get_personality_by_id", (personality_id,))
        return map_rows(cursor)

    def get_all(self) -> list[Personality]:
        """Fetch every personality, in table order."""
        cursor = run_query(self.pool, _SELECT_PERSONALITIES, "get_all_personalities")
        return map_rows(cursor)
