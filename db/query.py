"""
db/query.py
-----------
Runs SQL against the pool and hands back a cursor over the result rows.
"""

from typing import Any, Iterator, Optional, Sequence

import psycopg2
from sqlalchemy.pool import QueuePool

from db.errors import QueryError
from utils.timing import time_track


class RowCursor:
    """
    Forward-only view over the rows of one query.

    Owns the pooled connection the query ran on: `close()` releases the
    cursor and checks the connection back into the pool. Safe to close more
    than once.
    """

    def __init__(self, conn, cursor):
        self._conn = conn
        self._cursor = cursor
        self.closed = False

    @property
    def description(self):
        return self._cursor.description

    def __iter__(self) -> Iterator[tuple]:
        return iter(self._cursor)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self._cursor.close()
        finally:
            self._conn.close()

    def __enter__(self) -> "RowCursor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def run_query(
    pool: QueuePool,
    sql: str,
    operation_name: str,
    params: Optional[Sequence[Any]] = None,
) -> RowCursor:
    """
    Execute `sql` with bound `params` and return its rows.

    The elapsed time is logged under `operation_name` whether the query
    succeeds or not.

    Raises:
        QueryError: If no connection could be obtained or execution failed.
    """
    with time_track(operation_name):
        try:
            conn = pool.connect()
        except psycopg2.Error as e:
            raise QueryError(operation_name, e) from e

        cursor = None
        try:
            cursor = conn.cursor()
            cursor.execute(sql, params)
        except psycopg2.Error as e:
            if cursor is not None:
                cursor.close()
            if isinstance(e, psycopg2.OperationalError):
                # server side is gone; invalidate also checks the slot back in
                conn.invalidate(e)
            else:
                conn.close()
            raise QueryError(operation_name, e) from e

    return RowCursor(conn, cursor)
