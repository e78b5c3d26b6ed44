"""
db/errors.py
------------
Exceptions raised by the database layer.

Startup errors (`ConfigError`, `CertError`, `DBConnectionError`) are fatal
and stop the process before the HTTP listener binds. Request errors
(`QueryError`, `MappingError`) are turned into HTTP 500 responses by the
handlers layer.
"""


class PersonalityAPIError(Exception):
    """Base class for all errors raised by this service."""


class ConfigError(PersonalityAPIError):
    """The credential file is missing, unreadable or malformed."""


class CertError(PersonalityAPIError):
    """The CA certificate file is missing, unreadable or holds no valid certificate."""


class DBConnectionError(PersonalityAPIError):
    """The TLS profile could not be registered or the driver rejected the connection string."""


class QueryError(PersonalityAPIError):
    """A query failed to execute."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class MappingError(PersonalityAPIError):
    """A result row did not have the expected column types."""
