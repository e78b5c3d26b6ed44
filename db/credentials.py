"""
db/credentials.py
-----------------
Loads the database credentials (YAML) and the CA bundle (PEM) that secures
the connection. Both files are mounted into the container at fixed paths.
"""

import re
import ssl
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import yaml

from config import DB_SOURCE_FILE_PATH, PEM_FILE_PATH
from db.errors import CertError, ConfigError
from models.db_source import DBSource
from utils.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

PEM_BLOCK = re.compile(
    r"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----",
    re.DOTALL,
)


@dataclass(frozen=True)
class CertificatePool:
    """
    A parsed CA bundle.

    Attributes:
        path: Location of the bundle on disk (libpq reads it from there).
        pem: The bundle contents.
        count: Number of CA certificates it holds.
    """
    path: str
    pem: str
    count: int


def load_db_source(path: PathLike = DB_SOURCE_FILE_PATH) -> DBSource:
    """
    Read the YAML credential file.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, is not a
            mapping, or lacks one of the required keys.
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as e:
        raise ConfigError(f"Cannot read credential file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed credential file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Credential file {path} must contain a YAML mapping")

    missing = [key for key in DBSource.FIELDS if data.get(key) is None]
    if missing:
        raise ConfigError(f"Credential file {path} is missing: {', '.join(missing)}")

    values = {}
    for key in DBSource.FIELDS:
        value = data[key]
        if isinstance(value, (dict, list)):
            raise ConfigError(f"Credential file {path}: '{key}' must be a scalar")
        # YAML turns `port: 5432` into an int
        values[key] = str(value)
    return DBSource(**values)


def load_cert_pool(path: PathLike = PEM_FILE_PATH) -> CertificatePool:
    """
    Read and validate the PEM CA bundle.

    Every certificate in the file must parse, otherwise the whole bundle
    is rejected.

    Raises:
        CertError: If the file cannot be read or holds no valid certificate.
    """
    try:
        pem = Path(path).read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as e:
        raise CertError(f"Cannot read certificate file {path}: {e}") from e

    blocks = PEM_BLOCK.findall(pem)
    if not blocks:
        raise CertError(f"No certificate found in {path}")

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    for index, block in enumerate(blocks, start=1):
        try:
            context.load_verify_locations(cadata=block)
        except (ssl.SSLError, ValueError) as e:
            raise CertError(f"Certificate #{index} in {path} is invalid: {e}") from e

    return CertificatePool(path=str(path), pem="\n".join(blocks) + "\n", count=len(blocks))


def load(
    db_source_path: PathLike = DB_SOURCE_FILE_PATH,
    pem_path: PathLike = PEM_FILE_PATH,
) -> tuple[DBSource, CertificatePool]:
    """
    Load everything needed to open the database connection.

    Returns:
        The connection descriptor and the CA pool.

    Raises:
        ConfigError: Credential file problem.
        CertError: Certificate file problem.
    """
    source = load_db_source(db_source_path)
    cert_pool = load_cert_pool(pem_path)
    logger.info(
        f"Loaded credentials for {source.user}@{source.host}:{source.port}/{source.database} "
        f"with {cert_pool.count} CA certificate(s)."
    )
    return source, cert_pool
