from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import time, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode

from .connection import DatabaseConnection


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


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def in_clause(values: Sequence[Any]) -> Tuple[str, Tuple[Any, ...]]:
    """Placeholder list for `IN (...)` filters."""
    values = tuple(values)
    return ", ".join(["%s"] * len(values)), values


def build_update(columns: Dict[str, Any], allowed: Iterable[str]) -> Tuple[str, List[Any]]:
    """SET clause for a partial update restricted to whitelisted columns."""
    allowed = set(allowed)
    parts: list[str] = []
    params: list[Any] = []
    for name, value in columns.items():
        if name not in allowed:
            continue
        parts.append(f"{name}=%s")
        params.append(value.value if isinstance(value, Enum) else value)
    return ", ".join(parts), params


def dump_json_list(values: Optional[Iterable[Any]]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps(list(values))


def load_json_list(value: Any) -> List[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    loaded = json.loads(value)
    return list(loaded) if isinstance(loaded, list) else [loaded]


def dump_json_dict(values: Optional[Dict[str, Any]]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps(dict(values))


def load_json_dict(value: Any) -> Dict[str, Any]:
    if value is None or value == "":
        return {}
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    loaded = json.loads(value)
    return dict(loaded) if isinstance(loaded, dict) else {}


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


def plain_values(values: Dict[str, Any]) -> Dict[str, Any]:
    """Enum members become their stored value."""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}


def insert_row(cur, table: str, values: Dict[str, Any], allowed: Iterable[str]) -> int:
    """INSERT the whitelisted columns present in `values`; returns lastrowid."""
    values = plain_values(values)
    columns = [c for c in allowed if c in values]
    cur.execute(
        f"INSERT INTO {table}({', '.join(columns)}) VALUES({', '.join(['%s'] * len(columns))})",
        tuple(values[c] for c in columns),
    )
    return int(cur.lastrowid)
