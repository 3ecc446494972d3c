"""
Account Store - login accounts.
"""
import sqlite3
from typing import Optional

from game.models.character import Account

_COLUMNS = "id, account, name, password_hash, is_admin"


class AccountStore:
    """Reads and writes the accounts table on the caller's connection."""

    def create(self, conn: sqlite3.Connection, account: str, name: str,
               password_hash: str, is_admin: bool = False) -> Account:
        cursor = conn.execute(
            "INSERT INTO accounts (account, name, password_hash, is_admin) VALUES (?, ?, ?, ?)",
            (account, name, password_hash, int(is_admin)),
        )
        return Account(
            id=cursor.lastrowid,
            account=account,
            name=name,
            password_hash=password_hash,
            is_admin=is_admin,
        )

    def get(self, conn: sqlite3.Connection, account_id: int) -> Optional[Account]:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM accounts WHERE id = ?", (account_id,)
        ).fetchone()
        return Account.from_row(row) if row else None

    def get_by_account(self, conn: sqlite3.Connection, account: str) -> Optional[Account]:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM accounts WHERE account = ?", (account,)
        ).fetchone()
        return Account.from_row(row) if row else None

    def set_admin(self, conn: sqlite3.Connection, account_id: int, is_admin: bool = True) -> None:
        conn.execute("UPDATE accounts SET is_admin = ? WHERE id = ?", (int(is_admin), account_id))
