from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    """One connection per block and one transaction: commit on exit, rollback if anything raises."""
    conn = conn_factory.connect()
    # Buffered: lock-then-write blocks issue several statements per cursor.
    cur = conn.cursor(dictionary=dictionary, buffered=True)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        logger.debug("Rolling back payroll transaction", exc_info=True)
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def select_for_update(cur, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
    """Run a SELECT that row-locks its result until the surrounding transaction ends."""
    cur.execute(f"{sql.rstrip().rstrip(';')} FOR UPDATE", tuple(params))
    return fetchall(cur)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Shift start/end columns: mysql-connector returns TIME as timedelta, some drivers as str."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        return (datetime.min + timedelta(seconds=int(value.total_seconds()) % 86400)).time()
    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        seconds = int(parts[2]) if len(parts) > 2 and parts[2] else 0
        return time(int(parts[0]), int(parts[1]), seconds)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def normalize_mysql_datetime(value: Any) -> Optional[datetime]:
    """Clock-in/out columns: DATETIME, or an ISO string from older imports."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip().replace("T", " "))
    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")
