"""
HTTP routes for the economy server.

Helpers shared by every blueprint: service lookup and the session principal.
"""
from functools import wraps

from flask import current_app, session

from economy.errors import AuthenticationError, AuthorizationError


def services():
    """The GameServices bundle built by create_app."""
    return current_app.extensions["game"]


def current_account_id():
    """Account id of the signed-in user, or None."""
    return session.get("user_id")


def require_auth(f):
    """Decorator to require a signed-in account for routes."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_account_id() is None:
            raise AuthenticationError("Please sign in first.")
        return f(*args, **kwargs)
    return decorated_function


def require_admin(f):
    """Decorator to require an admin account for routes."""
    @wraps(f)
    @require_auth
    def decorated_function(*args, **kwargs):
        if not services().accounts.is_admin(current_account_id()):
            raise AuthorizationError("Admin privileges required.")
        return f(*args, **kwargs)
    return decorated_function
