"""
Equipment Store - the item copies a character is wearing.

At most one row per (character, item code); the table's UNIQUE constraint
backs that up. Pure data access on the caller's connection.
"""
import sqlite3
from typing import List, Optional

from core.database import fits_integer
from game.models.item import EquippedEntry, ItemDefinition

_COLUMNS = "id, character_id, item_code, health_bonus, power_bonus"


class EquipmentStore:
    """Reads and writes the character_items table."""

    def add(self, conn: sqlite3.Connection, character_id: int,
            item: ItemDefinition) -> EquippedEntry:
        """
        Record an item as worn, snapshotting its current bonuses.

        Raises:
            sqlite3.IntegrityError: If the item code is already worn.
        """
        cursor = conn.execute(
            "INSERT INTO character_items (character_id, item_code, health_bonus, power_bonus) "
            "VALUES (?, ?, ?, ?)",
            (character_id, item.item_code, item.health_bonus, item.power_bonus),
        )
        return EquippedEntry(
            id=cursor.lastrowid,
            character_id=character_id,
            item_code=item.item_code,
            health_bonus=item.health_bonus,
            power_bonus=item.power_bonus,
        )

    def remove(self, conn: sqlite3.Connection, entry_id: int) -> bool:
        cursor = conn.execute("DELETE FROM character_items WHERE id = ?", (entry_id,))
        return cursor.rowcount == 1

    def find(self, conn: sqlite3.Connection, character_id: int,
             item_code: int) -> Optional[EquippedEntry]:
        if not fits_integer(item_code):
            return None
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM character_items WHERE character_id = ? AND item_code = ?",
            (character_id, item_code),
        ).fetchone()
        return EquippedEntry.from_row(row) if row else None

    def list(self, conn: sqlite3.Connection, character_id: int) -> List[EquippedEntry]:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM character_items WHERE character_id = ? ORDER BY id",
            (character_id,),
        ).fetchall()
        return [EquippedEntry.from_row(row) for row in rows]

    def count(self, conn: sqlite3.Connection, character_id: int) -> int:
        row = conn.execute(
            "SELECT COUNT(*) AS count FROM character_items WHERE character_id = ?",
            (character_id,),
        ).fetchone()
        return row["count"]
