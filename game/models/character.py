"""
Character and Account Models
Rows owned by players: login accounts and the characters they play.
"""
import sqlite3
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Account:
    """A login account. Holds the password hash, never the password."""
    id: int
    account: str
    name: str
    password_hash: str
    is_admin: bool = False

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Account":
        return cls(
            id=row["id"],
            account=row["account"],
            name=row["name"],
            password_hash=row["password_hash"],
            is_admin=bool(row["is_admin"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"userId": self.id, "account": self.account, "name": self.name}


@dataclass
class Character:
    """
    A playable character.

    health and power already include the bonuses of every equipped item.
    """
    id: int
    account_id: int
    name: str
    health: int
    power: int
    money: int

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Character":
        return cls(
            id=row["id"],
            account_id=row["account_id"],
            name=row["name"],
            health=row["health"],
            power=row["power"],
            money=row["money"],
        )

    def is_owned_by(self, account_id: int) -> bool:
        return self.account_id == account_id

    def to_dict(self, include_money: bool = True) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "health": self.health,
            "power": self.power,
        }
        if include_money:
            data["money"] = self.money
        return data
