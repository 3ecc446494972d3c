"""
Account registration and sign-in.

Produces the authenticated principal (an account id) the rest of the server
acts on behalf of.
"""
import logging
import re
import sqlite3
from typing import Iterable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from core.database import Database
from economy.errors import ConflictError, ValidationError
from game.models.character import Account
from game.systems.account_store import AccountStore

logger = logging.getLogger(__name__)

ACCOUNT_PATTERN = re.compile(r"^[a-z0-9]+$")
MIN_PASSWORD_LENGTH = 6


class AccountService:
    def __init__(self, db: Database, store: AccountStore = None,
                 admin_users: Iterable[str] = ()):
        self.db = db
        self.store = store or AccountStore()
        self.admin_users = {u.strip().lower() for u in admin_users if u.strip()}

    def sign_up(self, account: str, password: str, password_confirm: str,
                name: str = "") -> Account:
        """
        Register a new account.

        Raises:
            ValidationError: Bad account name, short password or mismatched confirmation
            ConflictError: The account name is taken
        """
        if not isinstance(account, str) or not isinstance(password, str):
            raise ValidationError("Account and password are required.")
        if password != password_confirm:
            raise ValidationError("Passwords do not match.")
        if not ACCOUNT_PATTERN.match(account):
            raise ValidationError("Account names may only use lowercase letters and digits.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters.")

        password_hash = generate_password_hash(password)
        try:
            with self.db.transaction() as conn:
                if self.store.get_by_account(conn, account) is not None:
                    raise ConflictError("That account already exists.")
                created = self.store.create(conn, account, name or "", password_hash)
        except sqlite3.IntegrityError:
            raise ConflictError("That account already exists.")
        logger.info(f"Account {created.account} registered (id {created.id})")
        return created

    def authenticate(self, account: str, password: str) -> Account:
        """
        Check credentials.

        Raises:
            ValidationError: Unknown account or wrong password
        """
        with self.db.transaction(immediate=False) as conn:
            found = self.store.get_by_account(conn, account) if isinstance(account, str) else None
        if found is None:
            raise ValidationError("That account does not exist.")
        if not isinstance(password, str) or not check_password_hash(found.password_hash, password):
            logger.info(f"Failed sign-in for account {account}")
            raise ValidationError("Incorrect password.")
        logger.info(f"Account {account} signed in")
        return found

    def get(self, account_id: int) -> Optional[Account]:
        with self.db.transaction(immediate=False) as conn:
            return self.store.get(conn, account_id)

    def is_admin(self, account_id: int) -> bool:
        """Admins are flagged in the database or listed in ADMIN_USERS."""
        found = self.get(account_id)
        if found is None:
            return False
        return found.is_admin or found.account.lower() in self.admin_users
