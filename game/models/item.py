"""
Item Models
Catalog definitions and the per-character rows that reference them.
"""
import sqlite3
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ItemDefinition:
    """A purchasable item as listed in the catalog."""
    item_code: int
    name: str
    health_bonus: int
    power_bonus: int
    price: int

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "ItemDefinition":
        return cls(
            item_code=row["item_code"],
            name=row["item_name"],
            health_bonus=row["health"],
            power_bonus=row["power"],
            price=row["item_price"],
        )

    def to_summary(self) -> Dict[str, Any]:
        """Shape used by the item list."""
        return {
            "item_code": self.item_code,
            "item_name": self.name,
            "item_price": self.price,
        }

    def to_detail(self) -> Dict[str, Any]:
        """Shape used by the item detail view."""
        return {
            "item_code": self.item_code,
            "item_name": self.name,
            "item_stat": {"health": self.health_bonus, "power": self.power_bonus},
            "item_price": self.price,
        }


@dataclass(frozen=True)
class InventoryEntry:
    """One unequipped copy of an item owned by a character."""
    id: int
    character_id: int
    item_code: int

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "InventoryEntry":
        return cls(id=row["id"], character_id=row["character_id"], item_code=row["item_code"])


@dataclass(frozen=True)
class EquippedEntry:
    """
    The copy of an item a character is wearing.

    Stores the bonuses applied at equip time so unequipping removes exactly
    what was added.
    """
    id: int
    character_id: int
    item_code: int
    health_bonus: int
    power_bonus: int

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "EquippedEntry":
        return cls(
            id=row["id"],
            character_id=row["character_id"],
            item_code=row["item_code"],
            health_bonus=row["health_bonus"],
            power_bonus=row["power_bonus"],
        )
