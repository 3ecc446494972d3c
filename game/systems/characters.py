"""
Character lifecycle: creation, lookup and deletion.
"""
import logging
import sqlite3
from typing import Any, Dict, List

from core.database import Database
from core.redis_manager import CharacterLockManager
from economy.currency import STARTING_HEALTH, STARTING_MONEY, STARTING_POWER
from economy.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from game.models.character import Character
from game.systems.character_store import CharacterStore

logger = logging.getLogger(__name__)


class CharacterService:
    def __init__(self, db: Database, locks: CharacterLockManager,
                 store: CharacterStore = None):
        self.db = db
        self.locks = locks
        self.store = store or CharacterStore()

    def create_character(self, account_id: int, name: str) -> Character:
        """
        Create a character with the starting stats and balance.

        Raises:
            ValidationError: Missing name
            ConflictError: The name is taken
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("A character name is required.")
        name = name.strip()
        try:
            with self.db.transaction() as conn:
                if self.store.get_by_name(conn, name) is not None:
                    raise ConflictError("That character name is already taken.")
                character = self.store.create(
                    conn, account_id, name,
                    health=STARTING_HEALTH, power=STARTING_POWER, money=STARTING_MONEY,
                )
        except sqlite3.IntegrityError:
            raise ConflictError("That character name is already taken.")
        logger.info(f"Account {account_id} created character {character.name} (id {character.id})")
        return character

    def delete_character(self, character_id: int, account_id: int) -> None:
        """Delete an owned character along with its inventory and equipment."""
        with self.locks.lock(character_id):
            with self.db.transaction() as conn:
                character = self.store.get(conn, character_id)
                if character is None:
                    raise NotFoundError(f"Character {character_id} was not found.")
                if not character.is_owned_by(account_id):
                    raise AuthorizationError("You may not delete this character.")
                self.store.delete(conn, character_id)
        logger.info(f"Account {account_id} deleted character {character_id}")

    def character_detail(self, character_id: int, account_id: int) -> Dict[str, Any]:
        """Public stats; the balance is only shown to the owner."""
        with self.db.transaction(immediate=False) as conn:
            character = self.store.get(conn, character_id)
        if character is None:
            raise NotFoundError(f"Character {character_id} was not found.")
        return character.to_dict(include_money=character.is_owned_by(account_id))

    def list_characters(self, account_id: int) -> List[Character]:
        with self.db.transaction(immediate=False) as conn:
            return self.store.list_for_account(conn, account_id)
