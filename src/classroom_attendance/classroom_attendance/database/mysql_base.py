from __future__ import annotations

import logging
import time as time_module
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Callable, Dict, List, Optional, TypeVar

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import DEFAULT_RETRY_BACKOFF_SECONDS, DEFAULT_STORAGE_RETRIES
from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRNOS = frozenset({errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT})


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_transient(err: mysql.connector.Error) -> bool:
    return getattr(err, "errno", None) in TRANSIENT_ERRNOS


def run_with_retries(
    operation: Callable[[], T],
    *,
    retries: int = DEFAULT_STORAGE_RETRIES,
    backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
    label: str = "db operation",
) -> T:
    """Run `operation`, retrying deadlocks and lock-wait timeouts.

    Every attempt runs in its own transaction (see db_cursor), so a retried attempt
    never sees half of a rolled-back write. Non-transient errors propagate as-is.
    """

    attempts = max(1, int(retries))
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except mysql.connector.Error as e:
            if not is_transient(e):
                raise
            if attempt == attempts:
                logger.error("%s failed after %d attempts: %s", label, attempts, e)
                raise StorageError(f"{label} failed, please retry later") from e
            logger.warning("%s hit a transient conflict (attempt %d/%d): %s", label, attempt, attempts, e)
            time_module.sleep(backoff_seconds * attempt)

    raise StorageError(f"{label} failed")


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
