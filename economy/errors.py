"""
Error taxonomy for economy operations.

Every error carries the HTTP status the web layer answers with.
"""


class EconomyError(Exception):
    """Base class for rejected economy operations."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EconomyError):
    """Malformed request payload."""

    status_code = 400


class AuthenticationError(EconomyError):
    """No authenticated principal on the request."""

    status_code = 401


class AuthorizationError(EconomyError):
    """Acting account does not own the target character."""

    status_code = 403


class NotFoundError(EconomyError):
    """Character or item does not exist."""

    status_code = 404


class ConflictError(EconomyError):
    """Request contradicts the current inventory or equipment state."""

    status_code = 400


class InsufficientFundsError(EconomyError):
    """Purchase total exceeds the character's balance."""

    status_code = 400

    def __init__(self, message: str, balance: int = 0, required: int = 0):
        super().__init__(message)
        self.balance = balance
        self.required = required
