#!/usr/bin/env python3
"""
Load item definitions into the catalog, and optionally promote an admin.

Usage:
    python3 seed_items.py data/items.json
    python3 seed_items.py data/items.json --admin someaccount
"""

import argparse
import logging
import sys

from config import Config
from core.database import Database
from economy.catalog import SqliteCatalog, load_item_file
from game.systems.account_store import AccountStore

logger = logging.getLogger(__name__)


def promote_to_admin(db: Database, account: str) -> bool:
    """Promote an account to admin status."""
    store = AccountStore()
    with db.transaction() as conn:
        found = store.get_by_account(conn, account)
        if found is None:
            print(f"Error: Account '{account}' not found in database")
            return False
        if found.is_admin:
            print(f"Account '{account}' is already an admin")
            return True
        store.set_admin(conn, found.id)
    print(f"✓ Successfully promoted '{account}' to admin")
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the item catalog")
    parser.add_argument("items_file", help="JSON list of item definitions")
    parser.add_argument("--database", default=Config.DATABASE, help="sqlite file to seed")
    parser.add_argument("--admin", help="account to promote to admin")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')

    db = Database(args.database, timeout=Config.DB_TIMEOUT)
    db.init_db()

    try:
        definitions = load_item_file(args.items_file)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    added = SqliteCatalog(db).seed(definitions)
    print(f"Added {added} of {len(definitions)} items to {args.database}")

    if args.admin and not promote_to_admin(db, args.admin):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
