"""
models/personality.py
---------------------
Domain model for a row of the speakers table.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Personality:
    """
    A single personality record.

    Attributes:
        id: Database primary key.
        name: Display name.
        email: Contact address (the `mail` column).
        created_at: Timestamp when the row was created.
        updated_at: Timestamp of the last modification.
    """
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        """JSON-ready representation using the public API field names."""
        return {
            "ID": self.id,
            "Name": self.name,
            "Email": self.email,
            "CreatedAt": self.created_at.isoformat(),
            "UpdatedAt": self.updated_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"#{self.id} {self.name} <{self.email}>"
