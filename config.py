"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
PG_HOST: str = os.getenv("PG_HOST", "pizzaria_postgres")
PG_PORT: int = int(os.getenv("PG_PORT", "5432"))
PG_DATABASE: str = os.getenv("PG_DATABASE", "pizzaria")
PG_USER: str = os.getenv("PG_USER", "postgres")
PG_PASSWORD: str = os.getenv("PG_PASSWORD", "postgres")
PG_SSL: bool = os.getenv("PG_SSL", "false").lower() == "true"

# ── Connection pool ───────────────────────────────────────
DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "10"))
DB_CHECKOUT_TIMEOUT_SECONDS: float = float(os.getenv("DB_CHECKOUT_TIMEOUT_SECONDS", "30"))
DB_STATEMENT_TIMEOUT_MS: int = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "0"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Authentication ────────────────────────────────────────
SESSION_TTL_DAYS: int = int(os.getenv("SESSION_TTL_DAYS", "7"))
PASSWORD_RESET_TTL_HOURS: int = int(os.getenv("PASSWORD_RESET_TTL_HOURS", "24"))


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection parameters for one PostgreSQL database.

    Attributes:
        host, port, database, user, password: Standard connection keys.
        ssl: Require TLS when True, disable it otherwise.
        pool_min / pool_max: Bounds of the connection pool.
        checkout_timeout: Seconds to wait for a free connection (0 = forever).
        statement_timeout_ms: Server-side statement timeout (0 = disabled).
    """
    host: str = PG_HOST
    port: int = PG_PORT
    database: str = PG_DATABASE
    user: str = PG_USER
    password: str = PG_PASSWORD
    ssl: bool = PG_SSL
    pool_min: int = DB_POOL_MIN
    pool_max: int = DB_POOL_MAX
    checkout_timeout: float = DB_CHECKOUT_TIMEOUT_SECONDS
    statement_timeout_ms: int = DB_STATEMENT_TIMEOUT_MS

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Build settings from the module-level constants."""
        return cls()

    def connect_kwargs(self) -> dict:
        """Keyword arguments accepted by ``psycopg2.connect``."""
        kwargs = {
            "host": self.host,
            "port": self.port,
            "dbname": self.database,
            "user": self.user,
            "password": self.password,
            "sslmode": "require" if self.ssl else "disable",
        }
        if self.statement_timeout_ms > 0:
            kwargs["options"] = f"-c statement_timeout={self.statement_timeout_ms}"
        return kwargs

    def describe(self) -> str:
        """Log-safe ``host:port/database`` string (no credentials)."""
        return f"{self.host}:{self.port}/{self.database}"
