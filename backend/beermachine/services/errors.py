# Overview: Error taxonomy for balance, stock, sale and undo operations.

from __future__ import annotations


class LedgerError(Exception):
    """
    Base class for business-rule failures.

    Carries structured details so routes can render a precise message
    (e.g. required vs available credits) and the HTTP status to answer with.
    """
    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NotFoundError(LedgerError):
    status_code = 404


class DrinkUnavailableError(LedgerError):
    """Drink inactive, out of stock, or short of the requested quantity."""


class InsufficientCreditsError(LedgerError):
    def __init__(self, required: int, available: int, message: str = "Insufficient credits"):
        super().__init__(message, details={"required": required, "available": available})
        self.required = required
        self.available = available


class InsufficientStockError(LedgerError):
    def __init__(self, requested: int, available: int):
        super().__init__("Insufficient stock", details={"requested": requested, "available": available})
        self.requested = requested
        self.available = available


class InvalidAmountError(LedgerError):
    pass


class InvalidQuantityError(LedgerError):
    pass


class UnsupportedTransactionTypeError(LedgerError):
    pass


class ConcurrencyConflictError(LedgerError):
    """Row lock timeout or stale row version; the unit of work was rolled back."""
    status_code = 409
