from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, TypeVar

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) and commit on success.

    Driver errors surface as StorageError carrying the backend's message.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageError(str(e)) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError(str(e)) from e
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


def read_or_default(default_factory: Callable[[], T]):
    """Reads log backend failures and fall back to an empty result.

    Writes are left undecorated so StorageError reaches the caller.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except StorageError:
                logger.exception("Error in %s", func.__qualname__)
                return default_factory()

        return wrapper

    return decorator


def as_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def as_iso(value: Any) -> str:
    """DATE columns come back as datetime.date; stored as ISO strings everywhere else."""
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d")
    return str(value)
