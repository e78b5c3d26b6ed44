"""
db/tls.py
---------
Registry of named TLS profiles.

A profile binds a name to a CA bundle. `initialize()` registers the bundle
at startup and `build_dsn()` resolves the profile by that name when it
writes the TLS options into the connection string.
"""

import threading
from dataclasses import dataclass

from db.credentials import CertificatePool
from db.errors import DBConnectionError
from utils.logger import get_logger

logger = get_logger(__name__)

_profiles: dict[str, "TLSProfile"] = {}
_lock = threading.Lock()


@dataclass(frozen=True)
class TLSProfile:
    """TLS parameters registered under `name`."""
    name: str
    root_cert_path: str

    def dsn_params(self) -> dict[str, str]:
        """libpq keywords that enforce this profile on a connection."""
        return {
            "sslmode": "verify-full",
            "sslrootcert": self.root_cert_path,
        }


def register_tls_profile(name: str, cert_pool: CertificatePool) -> TLSProfile:
    """
    Register `cert_pool` as the trusted roots of profile `name`.

    Re-registering a name replaces the previous profile.

    Raises:
        DBConnectionError: If the name is empty or the pool holds no certificate.
    """
    if not name:
        raise DBConnectionError("TLS profile name must not be empty")
    if cert_pool.count < 1:
        raise DBConnectionError(f"TLS profile '{name}' needs at least one CA certificate")

    profile = TLSProfile(name=name, root_cert_path=cert_pool.path)
    with _lock:
        _profiles[name] = profile
    logger.info(f"Registered TLS profile '{name}' ({cert_pool.count} CA certificate(s)).")
    return profile


def get_tls_profile(name: str) -> TLSProfile:
    """
    Look up a registered profile.

    Raises:
        DBConnectionError: If nothing is registered under `name`.
    """
    with _lock:
        profile = _profiles.get(name)
    if profile is None:
        raise DBConnectionError(f"Unknown TLS profile '{name}'")
    return profile


def clear_tls_profiles() -> None:
    """Forget every registered profile."""
    with _lock:
        _profiles.clear()
