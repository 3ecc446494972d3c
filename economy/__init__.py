"""
Economy system for the character server.

This package handles currency rules, the item catalog, and the engine that
applies purchases, sales and equipment changes atomically.
"""

from economy.currency import (
    EARN_MONEY_AMOUNT,
    STARTING_HEALTH,
    STARTING_MONEY,
    STARTING_POWER,
    can_afford,
    format_money,
    purchase_total,
    sale_price,
)
from economy.catalog import CatalogLookup, SqliteCatalog, load_item_file
from economy.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    EconomyError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from economy.economy_manager import (
    EconomyEngine,
    PurchaseLine,
    parse_item_code,
    parse_purchase_request,
    parse_sell_request,
)

__all__ = [
    "EARN_MONEY_AMOUNT",
    "STARTING_HEALTH",
    "STARTING_MONEY",
    "STARTING_POWER",
    "can_afford",
    "format_money",
    "purchase_total",
    "sale_price",
    "CatalogLookup",
    "SqliteCatalog",
    "load_item_file",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "EconomyError",
    "InsufficientFundsError",
    "NotFoundError",
    "ValidationError",
    "EconomyEngine",
    "PurchaseLine",
    "parse_item_code",
    "parse_purchase_request",
    "parse_sell_request",
]
