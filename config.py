"""
config.py
---------
Central configuration module. The service runs inside a container with its
credentials mounted at fixed paths, so everything here is a typed constant.
"""

# ── Credentials ───────────────────────────────────────────
DB_SOURCE_FILE_PATH: str = "/etc/credentials/db-connection.yml"
PEM_FILE_PATH: str = "/etc/credentials/rds-ca-root.pem"

# Name under which the CA bundle is registered for the driver
TLS_PROFILE_NAME: str = "custom"

# ── Connection pool ───────────────────────────────────────
DB_MAX_OPEN_CONNS: int = 50
DB_MAX_IDLE_CONNS: int = DB_MAX_OPEN_CONNS * 2
DB_CONN_MAX_LIFETIME_SECONDS: float = float(DB_MAX_OPEN_CONNS)

# ── HTTP server ───────────────────────────────────────────
SERVER_HOST: str = "0.0.0.0"
SERVER_PORT: int = 1323

GREETING: str = "Hello k8s!"

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = "INFO"
