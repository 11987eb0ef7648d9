import logging
import os
import time
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine

load_dotenv(override=True)

logger = logging.getLogger(__name__)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _install_sqlite_lower(dbapi_conn, connection_record) -> None:
    dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


def register_sqlite_functions(engine: Engine) -> None:
    """Replace SQLite's ASCII-only lower() with Python's Unicode case folding.

    ILIKE-style filters compile to lower(column) LIKE lower(value) on SQLite,
    so names such as "Ácido Fólico" only match case-insensitively with this.
    No-op for other dialects.
    """
    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _install_sqlite_lower):
        event.listen(engine, "connect", _install_sqlite_lower)


def get_engine(
    url: Optional[str] = None,
    wait_ready: bool = True,
    retries: int = 10,
    backoff_sec: float = 1.0,
) -> Engine:
    """Create a SQLAlchemy engine using env defaults if not provided and optionally wait for readiness.

    Env overrides:
      - DATABASE_URL (default sqlite:///./medicines.db)
    """
    url = url or os.environ.get("DATABASE_URL", "sqlite:///./medicines.db")
    engine = create_engine(url, pool_pre_ping=True)
    register_sqlite_functions(engine)

    if wait_ready:
        retries = max(1, retries)
        for i in range(retries):
            try:
                # A light call to verify connectivity
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                break
            except Exception:
                if i == retries - 1:
                    raise
                logger.warning(
                    "Database not ready (attempt %d/%d), retrying in %.1fs",
                    i + 1,
                    retries,
                    backoff_sec,
                )
                time.sleep(backoff_sec)
    return engine
