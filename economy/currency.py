"""
Currency rules for characters.

Money is a single non-negative integer balance. Every amount that crosses the
ledger is computed here in exact integer arithmetic.
"""

from typing import Iterable, Tuple

# Starting values for a new character
STARTING_MONEY = 10000
STARTING_HEALTH = 500
STARTING_POWER = 100

# Fixed reward per earn-money request
EARN_MONEY_AMOUNT = 100

# Most copies a single purchase request may add
MAX_PURCHASE_COUNT = 1000

# Merchants buy back at 60% of the list price
SALE_RATE_NUMERATOR = 3
SALE_RATE_DENOMINATOR = 5


def sale_price(price: int) -> int:
    """
    Get the amount paid out when a character sells one unit.

    Rounded down, never up, so selling can never create currency.

    Args:
        price: Catalog price of the item

    Returns:
        int: floor(price * 0.6)
    """
    return price * SALE_RATE_NUMERATOR // SALE_RATE_DENOMINATOR


def purchase_total(lines: Iterable[Tuple[int, int]]) -> int:
    """
    Sum the cost of a purchase.

    Args:
        lines: (unit_price, count) pairs

    Returns:
        int: Σ unit_price * count
    """
    return sum(price * count for price, count in lines)


def can_afford(balance: int, cost: int) -> bool:
    """Check if a balance covers a cost."""
    return cost >= 0 and balance >= cost


def format_money(amount: int) -> str:
    """Format an amount for player-facing messages (e.g. "1,800 gold")."""
    return f"{amount:,} gold"
