from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import STAFF_ROLES, Role
from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, is_duplicate_key
from .model import Account
from .repository import AccountRepository

_COLUMNS = "account_id, email, password_hash, full_name, role, is_active, must_change_password, created_at"


def _to_account(row: dict) -> Account:
    return Account(
        account_id=int(row["account_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        full_name=row["full_name"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        must_change_password=bool(row.get("must_change_password", False)),
        created_at=row.get("created_at"),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE account_id=%s", (account_id,))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def create_account(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        role: Role,
        must_change_password: bool = False,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO accounts(email, password_hash, full_name, role, is_active, must_change_password)
                    VALUES(%s,%s,%s,%s,1,%s)
                    """,
                    (email, password_hash, full_name, role.value, int(must_change_password)),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError("An account with this email already exists") from e
            raise

    def delete_by_id(self, account_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM accounts WHERE account_id=%s", (account_id,))
            return cur.rowcount > 0

    def set_active(self, account_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE accounts SET is_active=%s WHERE account_id=%s", (int(is_active), account_id))
            return cur.rowcount > 0

    def set_password(self, account_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE accounts SET password_hash=%s, must_change_password=0 WHERE account_id=%s",
                (password_hash, account_id),
            )
            return cur.rowcount > 0

    def list_staff(self) -> Sequence[Account]:
        placeholders, params = in_clause(sorted(r.value for r in STAFF_ROLES))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM accounts WHERE role IN ({placeholders}) ORDER BY full_name",
                params,
            )
            return [_to_account(r) for r in fetchall(cur)]
