"""
Inventory Store - owned-but-unequipped item copies per character.

Pure data access: every method runs on the caller's connection so it joins the
caller's transaction. No business rules live here.
"""
import sqlite3
from typing import List, Optional

from core.database import fits_integer
from game.models.item import InventoryEntry


class InventoryStore:
    """Reads and writes the character_inventory table."""

    def add(self, conn: sqlite3.Connection, character_id: int, item_code: int,
            count: int = 1) -> None:
        """Add ``count`` copies of an item."""
        conn.executemany(
            "INSERT INTO character_inventory (character_id, item_code) VALUES (?, ?)",
            [(character_id, item_code)] * count,
        )

    def remove(self, conn: sqlite3.Connection, entry_id: int) -> bool:
        """Delete one copy. Returns False if it was already gone."""
        cursor = conn.execute("DELETE FROM character_inventory WHERE id = ?", (entry_id,))
        return cursor.rowcount == 1

    def find(self, conn: sqlite3.Connection, character_id: int,
             item_code: int) -> Optional[InventoryEntry]:
        """Get any one copy of an item, oldest first."""
        if not fits_integer(item_code):
            return None
        row = conn.execute(
            "SELECT id, character_id, item_code FROM character_inventory "
            "WHERE character_id = ? AND item_code = ? ORDER BY id LIMIT 1",
            (character_id, item_code),
        ).fetchone()
        return InventoryEntry.from_row(row) if row else None

    def find_all(self, conn: sqlite3.Connection, character_id: int,
                 item_code: int) -> List[InventoryEntry]:
        if not fits_integer(item_code):
            return []
        rows = conn.execute(
            "SELECT id, character_id, item_code FROM character_inventory "
            "WHERE character_id = ? AND item_code = ? ORDER BY id",
            (character_id, item_code),
        ).fetchall()
        return [InventoryEntry.from_row(row) for row in rows]

    def list(self, conn: sqlite3.Connection, character_id: int) -> List[InventoryEntry]:
        rows = conn.execute(
            "SELECT id, character_id, item_code FROM character_inventory "
            "WHERE character_id = ? ORDER BY id",
            (character_id,),
        ).fetchall()
        return [InventoryEntry.from_row(row) for row in rows]

    def count(self, conn: sqlite3.Connection, character_id: int) -> int:
        row = conn.execute(
            "SELECT COUNT(*) AS count FROM character_inventory WHERE character_id = ?",
            (character_id,),
        ).fetchone()
        return row["count"]
