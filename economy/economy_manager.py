"""
Economy engine for characters.

Coordinates the catalog, inventory, equipment and ledger into atomic
operations: purchase, sell, equip, unequip and earn-money.

Every operation:
1. takes the character's exclusive lock,
2. opens one BEGIN IMMEDIATE transaction,
3. loads the character and checks the acting account owns it,
4. validates the whole request,
5. applies every mutation, then commits.

Any error raised on the way rolls the transaction back, so a rejected request
leaves no trace.
"""

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from core.database import Database, fits_integer
from core.redis_manager import CharacterLockManager
from economy.catalog import CatalogLookup
from economy.currency import (
    EARN_MONEY_AMOUNT,
    MAX_PURCHASE_COUNT,
    can_afford,
    format_money,
    purchase_total,
    sale_price,
)
from economy.errors import (
    AuthorizationError,
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from game.models.character import Character
from game.models.item import InventoryEntry, ItemDefinition
from game.systems.character_store import CharacterStore
from game.systems.equipment_store import EquipmentStore
from game.systems.inventory_store import InventoryStore
from game.systems.ledger import Ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseLine:
    item_code: int
    count: int


def require_int(value: Any, field: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"'{field}' must be an integer.")
    if not fits_integer(value):
        raise ValidationError(f"'{field}' is out of range.")
    return value


def parse_purchase_request(body: Any) -> List[PurchaseLine]:
    """
    Validate a purchase payload.

    Args:
        body: Decoded JSON, expected [{"item_code": int, "count": int}, ...]

    Returns:
        list of PurchaseLine, in request order
    """
    if not isinstance(body, list) or not body:
        raise ValidationError("Send a non-empty list of items to purchase.")
    lines = []
    for entry in body:
        if not isinstance(entry, dict):
            raise ValidationError("Each purchase entry must be an object.")
        item_code = require_int(entry.get("item_code"), "item_code")
        count = require_int(entry.get("count"), "count")
        if count <= 0:
            raise ValidationError("'count' must be at least 1.")
        lines.append(PurchaseLine(item_code=item_code, count=count))
    check_purchase_size(lines)
    return lines


def check_purchase_size(lines: Sequence[PurchaseLine]) -> None:
    """Reject purchases that would add more than MAX_PURCHASE_COUNT copies."""
    if sum(line.count for line in lines) > MAX_PURCHASE_COUNT:
        raise ValidationError(
            f"A purchase may add at most {MAX_PURCHASE_COUNT} items."
        )


def parse_sell_request(body: Any) -> List[int]:
    """
    Validate a sell payload.

    Args:
        body: Decoded JSON, expected [{"item_code": int}, ...], one unit per entry

    Returns:
        list of item codes, in request order
    """
    if not isinstance(body, list) or not body:
        raise ValidationError("Send a non-empty list of items to sell.")
    codes = []
    for entry in body:
        if not isinstance(entry, dict):
            raise ValidationError("Each sell entry must be an object.")
        codes.append(require_int(entry.get("item_code"), "item_code"))
    return codes


def parse_item_code(body: Any) -> int:
    """Validate an equip/unequip payload: {"item_code": int}."""
    if not isinstance(body, dict):
        raise ValidationError("Send an object with an 'item_code'.")
    return require_int(body.get("item_code"), "item_code")


class EconomyEngine:
    """
    The only writer of money, inventory, equipment and derived stats.

    All collaborators are injected; the engine holds no global state.
    """

    def __init__(self, db: Database, catalog: CatalogLookup, locks: CharacterLockManager,
                 characters: CharacterStore = None, inventory: InventoryStore = None,
                 equipment: EquipmentStore = None, ledger: Ledger = None):
        self.db = db
        self.catalog = catalog
        self.locks = locks
        self.characters = characters or CharacterStore()
        self.inventory = inventory or InventoryStore()
        self.equipment = equipment or EquipmentStore()
        self.ledger = ledger or Ledger()

    # --- Atomic operations ---

    def purchase(self, character_id: int, account_id: int,
                 lines: Sequence[PurchaseLine]) -> int:
        """
        Buy items into the character's inventory.

        Args:
            character_id: Buyer
            account_id: Acting account (must own the character)
            lines: Items and counts to buy

        Returns:
            int: Balance after the purchase

        Raises:
            NotFoundError: An item code is not in the catalog
            InsufficientFundsError: The total exceeds the balance
        """
        if not lines:
            raise ValidationError("Send a non-empty list of items to purchase.")
        for line in lines:
            if line.count <= 0:
                raise ValidationError("'count' must be at least 1.")
        check_purchase_size(lines)

        with self._owned_character(character_id, account_id) as (conn, character):
            priced: List[Tuple[ItemDefinition, int]] = [
                (self._resolve_item(line.item_code), line.count) for line in lines
            ]
            total = purchase_total((item.price, count) for item, count in priced)

            if not can_afford(character.money, total):
                logger.info(
                    f"Purchase rejected for character {character.id}: "
                    f"cost {total}, balance {character.money}"
                )
                raise InsufficientFundsError(
                    f"Not enough money: the purchase costs {format_money(total)} "
                    f"but you have {format_money(character.money)}.",
                    balance=character.money,
                    required=total,
                )

            for item, count in priced:
                self.inventory.add(conn, character.id, item.item_code, count)
            money = self.ledger.adjust(conn, character.id, -total)

        logger.info(
            f"Character {character_id} bought {sum(c for _, c in priced)} item(s) "
            f"for {total}; balance {money}"
        )
        return money

    def sell(self, character_id: int, account_id: int, item_codes: Sequence[int]) -> int:
        """
        Sell inventory copies back at 60% of the list price, rounded down.

        Entries are checked in order, one unit each; the whole batch is
        validated before anything is written, then paid out in a single
        ledger update.

        Returns:
            int: Balance after the sale

        Raises:
            ConflictError: A unit is not in the inventory, or its item code
                is currently equipped
            NotFoundError: An item code is not in the catalog
        """
        if not item_codes:
            raise ValidationError("Send a non-empty list of items to sell.")

        with self._owned_character(character_id, account_id) as (conn, character):
            spares: Dict[int, List[InventoryEntry]] = {}
            resolved: Dict[int, ItemDefinition] = {}
            claimed: List[InventoryEntry] = []
            payout = 0

            for item_code in item_codes:
                if item_code not in spares:
                    spares[item_code] = self.inventory.find_all(conn, character.id, item_code)
                if not spares[item_code]:
                    raise ConflictError(f"Item {item_code} is not in your inventory.")
                if self.equipment.find(conn, character.id, item_code) is not None:
                    raise ConflictError(f"Item {item_code} is equipped and cannot be sold.")
                if item_code not in resolved:
                    resolved[item_code] = self._resolve_item(item_code)

                claimed.append(spares[item_code].pop(0))
                payout += sale_price(resolved[item_code].price)

            for entry in claimed:
                self.inventory.remove(conn, entry.id)
            money = self.ledger.adjust(conn, character.id, payout)

        logger.info(
            f"Character {character_id} sold {len(claimed)} item(s) for {payout}; balance {money}"
        )
        return money

    def equip(self, character_id: int, account_id: int, item_code: int) -> Character:
        """
        Move one inventory copy into the equipped slot for its item code.

        Returns:
            Character: The character with updated health/power

        Raises:
            ConflictError: No copy in the inventory, or already equipped
            NotFoundError: The item code is not in the catalog
        """
        with self._owned_character(character_id, account_id) as (conn, character):
            entry = self.inventory.find(conn, character.id, item_code)
            if entry is None:
                raise ConflictError(f"Item {item_code} is not in your inventory.")
            if self.equipment.find(conn, character.id, item_code) is not None:
                raise ConflictError(f"Item {item_code} is already equipped.")
            item = self._resolve_item(item_code)

            self.characters.adjust_stats(conn, character.id, item.health_bonus, item.power_bonus)
            try:
                self.equipment.add(conn, character.id, item)
            except sqlite3.IntegrityError:
                raise ConflictError(f"Item {item_code} is already equipped.")
            self.inventory.remove(conn, entry.id)
            updated = self.characters.get(conn, character.id)

        logger.info(
            f"Character {character_id} equipped item {item_code} "
            f"(health {updated.health}, power {updated.power})"
        )
        return updated

    def unequip(self, character_id: int, account_id: int, item_code: int) -> Character:
        """
        Take off an equipped item and return it to the inventory.

        Removes exactly the bonuses recorded when it was equipped.

        Raises:
            ConflictError: The item code is not equipped
        """
        with self._owned_character(character_id, account_id) as (conn, character):
            equipped = self.equipment.find(conn, character.id, item_code)
            if equipped is None:
                raise ConflictError(f"Item {item_code} is not equipped.")

            self.characters.adjust_stats(
                conn, character.id, -equipped.health_bonus, -equipped.power_bonus
            )
            self.equipment.remove(conn, equipped.id)
            self.inventory.add(conn, character.id, item_code)
            updated = self.characters.get(conn, character.id)

        logger.info(
            f"Character {character_id} unequipped item {item_code} "
            f"(health {updated.health}, power {updated.power})"
        )
        return updated

    def earn_money(self, character_id: int, account_id: int) -> int:
        """
        Credit the fixed earn-money reward.

        Returns:
            int: Balance after the credit
        """
        with self._owned_character(character_id, account_id) as (conn, character):
            money = self.ledger.adjust(conn, character.id, EARN_MONEY_AMOUNT)
        logger.info(f"Character {character_id} earned {EARN_MONEY_AMOUNT}; balance {money}")
        return money

    # --- Read models ---

    def inventory_listing(self, character_id: int, account_id: int) -> List[Dict[str, Any]]:
        """
        Group the character's inventory by item code.

        Returns:
            list of {"item_code", "item_name", "count"}, ordered by item code
        """
        with self.db.transaction(immediate=False) as conn:
            character = self._load_owned(conn, character_id, account_id)
            entries = self.inventory.list(conn, character.id)

        counts: Dict[int, int] = {}
        for entry in entries:
            counts[entry.item_code] = counts.get(entry.item_code, 0) + 1

        listing = []
        for item_code in sorted(counts):
            item = self.catalog.get_item(item_code)
            if item is None:
                logger.warning(f"Character {character_id} holds unknown item {item_code}")
                continue
            listing.append({"item_code": item_code, "item_name": item.name, "count": counts[item_code]})
        return listing

    def equipped_listing(self, character_id: int) -> List[Dict[str, Any]]:
        """List what a character is wearing. Visible to everyone."""
        with self.db.transaction(immediate=False) as conn:
            if self.characters.get(conn, character_id) is None:
                raise NotFoundError(f"Character {character_id} was not found.")
            equipped = self.equipment.list(conn, character_id)

        listing = []
        for entry in equipped:
            item = self.catalog.get_item(entry.item_code)
            if item is not None:
                listing.append({"item_code": entry.item_code, "item_name": item.name})
        return listing

    # --- Helpers ---

    @contextmanager
    def _owned_character(self, character_id: int,
                         account_id: int) -> Iterator[Tuple[sqlite3.Connection, Character]]:
        with self.locks.lock(character_id):
            with self.db.transaction() as conn:
                yield conn, self._load_owned(conn, character_id, account_id)

    def _load_owned(self, conn: sqlite3.Connection, character_id: int,
                    account_id: int) -> Character:
        character = self.characters.get(conn, character_id)
        if character is None:
            raise NotFoundError(f"Character {character_id} was not found.")
        if not character.is_owned_by(account_id):
            logger.warning(
                f"Account {account_id} tried to act on character {character_id} it does not own"
            )
            raise AuthorizationError("This is not your character.")
        return character

    def _resolve_item(self, item_code: int) -> ItemDefinition:
        item = self.catalog.get_item(item_code)
        if item is None:
            raise NotFoundError(f"Item code {item_code} was not found.")
        return item
