"""
Item catalog for the economy.

The economy engine only reads from the catalog (get_item / list_items).
Creating and editing definitions is an administrative concern handled by the
same class but never called from inside an economy operation.
"""

import json
import logging
import sqlite3
from typing import Any, Dict, Iterable, List, Optional, Protocol

from core.database import Database, fits_integer
from economy.errors import ConflictError, NotFoundError, ValidationError
from game.models.item import ItemDefinition

logger = logging.getLogger(__name__)

_COLUMNS = "item_code, item_name, health, power, item_price"


class CatalogLookup(Protocol):
    """Read-only view of item definitions, keyed by item code."""

    def get_item(self, item_code: int) -> Optional[ItemDefinition]: ...

    def list_items(self) -> List[ItemDefinition]: ...


class SqliteCatalog:
    """Catalog backed by the items table."""

    def __init__(self, db: Database):
        self.db = db

    def get_item(self, item_code: int) -> Optional[ItemDefinition]:
        """
        Look up one item definition.

        Args:
            item_code: Catalog key

        Returns:
            ItemDefinition, or None if no such item exists
        """
        if not fits_integer(item_code):
            return None
        conn = self.db.connect()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM items WHERE item_code = ?", (item_code,)
            ).fetchone()
        finally:
            conn.close()
        return ItemDefinition.from_row(row) if row else None

    def list_items(self) -> List[ItemDefinition]:
        conn = self.db.connect()
        try:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM items ORDER BY item_code").fetchall()
        finally:
            conn.close()
        return [ItemDefinition.from_row(row) for row in rows]

    def create_item(self, item_code: int, name: str, health: int = 0, power: int = 0,
                    price: int = 0) -> int:
        """
        Add a definition to the catalog.

        Returns:
            int: Row id of the new item

        Raises:
            ValidationError: If the price is negative
            ConflictError: If the item code is already taken
        """
        if price < 0:
            raise ValidationError("Item price cannot be negative.")
        if not all(fits_integer(v) for v in (item_code, health, power, price)):
            raise ValidationError("Item values are out of range.")
        try:
            with self.db.transaction() as conn:
                cursor = conn.execute(
                    "INSERT INTO items (item_code, item_name, health, power, item_price) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (item_code, name, health, power, price),
                )
                item_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            raise ConflictError(f"Item code {item_code} already exists.")
        logger.info(f"Catalog item {item_code} ({name}) created at price {price}")
        return item_id

    def update_item(self, item_code: int, name: str, health: int, power: int) -> ItemDefinition:
        """
        Rename an item or change its stats. The price is fixed once listed.

        Raises:
            NotFoundError: If the item code is unknown
        """
        if not fits_integer(item_code):
            raise NotFoundError(f"Item code {item_code} was not found.")
        if not (fits_integer(health) and fits_integer(power)):
            raise ValidationError("Item stats are out of range.")
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "UPDATE items SET item_name = ?, health = ?, power = ? WHERE item_code = ?",
                (name, health, power, item_code),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Item code {item_code} was not found.")
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM items WHERE item_code = ?", (item_code,)
            ).fetchone()
        logger.info(f"Catalog item {item_code} updated")
        return ItemDefinition.from_row(row)

    def seed(self, definitions: Iterable[Dict[str, Any]]) -> int:
        """
        Insert definitions that are not in the catalog yet.

        Args:
            definitions: Dicts shaped like the create-item request body

        Returns:
            int: Number of items added
        """
        added = 0
        with self.db.transaction() as conn:
            for definition in definitions:
                stat = definition.get("item_stat", {})
                cursor = conn.execute(
                    "INSERT OR IGNORE INTO items (item_code, item_name, health, power, item_price) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        int(definition["item_code"]),
                        definition["item_name"],
                        int(stat.get("health", 0)),
                        int(stat.get("power", 0)),
                        int(definition.get("item_price", 0)),
                    ),
                )
                added += cursor.rowcount
        logger.info(f"Seeded {added} catalog items")
        return added


def load_item_file(path: str) -> List[Dict[str, Any]]:
    """Read a JSON list of item definitions."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of items")
    return data
