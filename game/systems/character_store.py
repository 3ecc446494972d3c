"""
Character Store - character rows and their derived stats.
"""
import sqlite3
from typing import List, Optional

from core.database import fits_integer
from game.models.character import Character

_COLUMNS = "id, account_id, name, health, power, money"


class CharacterStore:
    """Reads and writes the characters table on the caller's connection."""

    def create(self, conn: sqlite3.Connection, account_id: int, name: str,
               health: int, power: int, money: int) -> Character:
        cursor = conn.execute(
            "INSERT INTO characters (account_id, name, health, power, money) VALUES (?, ?, ?, ?, ?)",
            (account_id, name, health, power, money),
        )
        return Character(
            id=cursor.lastrowid,
            account_id=account_id,
            name=name,
            health=health,
            power=power,
            money=money,
        )

    def get(self, conn: sqlite3.Connection, character_id: int) -> Optional[Character]:
        if not fits_integer(character_id):
            return None
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM characters WHERE id = ?", (character_id,)
        ).fetchone()
        return Character.from_row(row) if row else None

    def get_by_name(self, conn: sqlite3.Connection, name: str) -> Optional[Character]:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM characters WHERE name = ?", (name,)
        ).fetchone()
        return Character.from_row(row) if row else None

    def list_for_account(self, conn: sqlite3.Connection, account_id: int) -> List[Character]:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM characters WHERE account_id = ? ORDER BY id",
            (account_id,),
        ).fetchall()
        return [Character.from_row(row) for row in rows]

    def delete(self, conn: sqlite3.Connection, character_id: int) -> bool:
        """Delete a character; inventory and equipment rows cascade."""
        cursor = conn.execute("DELETE FROM characters WHERE id = ?", (character_id,))
        return cursor.rowcount == 1

    def adjust_stats(self, conn: sqlite3.Connection, character_id: int,
                     health_delta: int, power_delta: int) -> None:
        conn.execute(
            "UPDATE characters SET health = health + ?, power = power + ? WHERE id = ?",
            (health_delta, power_delta, character_id),
        )
