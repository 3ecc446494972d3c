import pytest

from core.database import Database
from economy.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from game.systems.accounts import AccountService


@pytest.fixture
def accounts(tmp_path):
    db = Database(str(tmp_path / "accounts.db"))
    db.init_db()
    return AccountService(db, admin_users=["boss"])


def test_sign_up_and_authenticate(accounts):
    created = accounts.sign_up("hero01", "secret1", "secret1", "Hero")
    assert created.to_dict() == {"userId": created.id, "account": "hero01", "name": "Hero"}
    assert created.password_hash != "secret1"

    assert accounts.authenticate("hero01", "secret1").id == created.id


@pytest.mark.parametrize("account, password, confirm", [
    ("Hero", "secret1", "secret1"),     # uppercase
    ("he-ro", "secret1", "secret1"),    # punctuation
    ("hero", "short", "short"),         # too short
    ("hero", "secret1", "secret2"),     # mismatch
    (None, "secret1", "secret1"),
])
def test_sign_up_validation(accounts, account, password, confirm):
    with pytest.raises(ValidationError):
        accounts.sign_up(account, password, confirm)


def test_duplicate_account(accounts):
    accounts.sign_up("hero", "secret1", "secret1")
    with pytest.raises(ConflictError):
        accounts.sign_up("hero", "secret2", "secret2")


def test_authenticate_failures(accounts):
    accounts.sign_up("hero", "secret1", "secret1")
    with pytest.raises(ValidationError):
        accounts.authenticate("nobody", "secret1")
    with pytest.raises(ValidationError):
        accounts.authenticate("hero", "wrong-password")


def test_admin_from_config_or_flag(accounts):
    boss = accounts.sign_up("boss", "secret1", "secret1")
    hero = accounts.sign_up("hero", "secret1", "secret1")
    assert accounts.is_admin(boss.id)
    assert not accounts.is_admin(hero.id)
    assert not accounts.is_admin(9999)

    with accounts.db.transaction() as conn:
        accounts.store.set_admin(conn, hero.id)
    assert accounts.is_admin(hero.id)


class TestCharacterService:
    def test_create_with_starting_stats(self, world):
        hero = world.new_character("hero")
        assert (hero.health, hero.power, hero.money) == (500, 100, 10000)

    def test_duplicate_name(self, world):
        world.new_character("hero")
        with pytest.raises(ConflictError):
            world.new_character("hero", account_id=world.stranger_id)

    def test_blank_name(self, world):
        with pytest.raises(ValidationError):
            world.new_character("   ")

    def test_detail_hides_money_from_others(self, world):
        hero = world.new_character("hero")
        assert world.characters.character_detail(hero.id, world.owner_id)["money"] == 10000
        assert "money" not in world.characters.character_detail(hero.id, world.stranger_id)
        with pytest.raises(NotFoundError):
            world.characters.character_detail(9999, world.owner_id)

    def test_delete_owner_only(self, world):
        hero = world.new_character("hero")
        with pytest.raises(AuthorizationError):
            world.characters.delete_character(hero.id, world.stranger_id)
        world.characters.delete_character(hero.id, world.owner_id)
        with pytest.raises(NotFoundError):
            world.characters.delete_character(hero.id, world.owner_id)

    def test_list_characters(self, world):
        world.new_character("a")
        world.new_character("b")
        world.new_character("c", account_id=world.stranger_id)
        assert [c.name for c in world.characters.list_characters(world.owner_id)] == ["a", "b"]
