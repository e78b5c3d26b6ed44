"""
models/db_source.py
-------------------
Connection descriptor read from the credential file.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DBSource:
    """
    Where and as whom to connect.

    Attributes:
        host: Database server hostname.
        port: Server port, kept as the string found in the credential file.
        user: Login role.
        password: Login password (hidden from repr).
        database: Database name.
    """
    host: str
    port: str
    user: str
    password: str = field(repr=False)
    database: str

    FIELDS = ("host", "port", "user", "password", "database")
