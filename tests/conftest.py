import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from core.database import Database
from core.redis_manager import CharacterLockManager
from economy.catalog import SqliteCatalog
from economy.economy_manager import EconomyEngine
from game.systems.account_store import AccountStore
from game.systems.characters import CharacterService

# item_code -> (name, health, power, price)
TEST_ITEMS = {
    1: ("Iron Sword", 20, 15, 3000),
    2: ("Leather Armor", 50, 0, 1000),
    3: ("Steel Helm", 30, 2, 999),
    4: ("Ruby Amulet", 20, 10, 6000),
}


class World:
    """A fresh database with a stocked catalog and two accounts."""

    def __init__(self, path):
        self.db = Database(path, timeout=5.0)
        self.db.init_db()
        self.locks = CharacterLockManager(timeout=5.0)
        self.catalog = SqliteCatalog(self.db)
        for code, (name, health, power, price) in TEST_ITEMS.items():
            self.catalog.create_item(code, name, health, power, price)
        self.engine = EconomyEngine(self.db, self.catalog, self.locks)
        self.characters = CharacterService(self.db, self.locks)

        store = AccountStore()
        with self.db.transaction() as conn:
            self.owner_id = store.create(conn, "owner", "Owner", "x").id
            self.stranger_id = store.create(conn, "stranger", "Stranger", "x").id

    def new_character(self, name="hero", account_id=None):
        return self.characters.create_character(account_id or self.owner_id, name)

    def snapshot(self, character_id):
        """(health, power, money, inventory count, equipped count)."""
        with self.db.transaction(immediate=False) as conn:
            character = self.engine.characters.get(conn, character_id)
            return (
                character.health,
                character.power,
                character.money,
                self.engine.inventory.count(conn, character_id),
                self.engine.equipment.count(conn, character_id),
            )

    def inventory_codes(self, character_id):
        with self.db.transaction(immediate=False) as conn:
            return sorted(e.item_code for e in self.engine.inventory.list(conn, character_id))

    def equipped_codes(self, character_id):
        with self.db.transaction(immediate=False) as conn:
            return sorted(e.item_code for e in self.engine.equipment.list(conn, character_id))


@pytest.fixture
def world(tmp_path):
    return World(str(tmp_path / "game.db"))


@pytest.fixture
def app(tmp_path):
    from app import create_app
    application = create_app({
        "TESTING": True,
        "DATABASE": str(tmp_path / "app.db"),
        "DB_TIMEOUT": 5.0,
        "REDIS_URL": None,
        "SECRET_KEY": "test-secret",
        "ADMIN_USERS": "admin",
        "LOG_FILE": "",
    })
    return application


@pytest.fixture
def client(app):
    return app.test_client()
