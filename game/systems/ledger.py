"""
Ledger - a character's currency balance.

Only the economy engine calls adjust(); the balance column carries a
CHECK (money >= 0) constraint as a last line of defence.
"""
import sqlite3


class Ledger:
    """Reads and adjusts characters.money."""

    def balance(self, conn: sqlite3.Connection, character_id: int) -> int:
        row = conn.execute("SELECT money FROM characters WHERE id = ?", (character_id,)).fetchone()
        if row is None:
            raise LookupError(f"Character {character_id} has no ledger")
        return row["money"]

    def adjust(self, conn: sqlite3.Connection, character_id: int, delta: int) -> int:
        """
        Add ``delta`` (may be negative) to the balance.

        Returns:
            int: The new balance

        Raises:
            sqlite3.IntegrityError: If the balance would go negative.
        """
        conn.execute(
            "UPDATE characters SET money = money + ? WHERE id = ?",
            (delta, character_id),
        )
        return self.balance(conn, character_id)
