# Overview: Service-layer operations for drink stock levels.

from __future__ import annotations

from ..extensions import db
from ..models import Drink
from ..validation import MAX_INT_FIELD
from .errors import InsufficientStockError, InvalidQuantityError


def _require_positive(quantity: int) -> None:
    if quantity <= 0:
        raise InvalidQuantityError("Stock quantity must be positive", details={"quantity": quantity})


def stocked_level(stock: int, quantity: int) -> int:
    _require_positive(quantity)
    if quantity > MAX_INT_FIELD:
        raise InvalidQuantityError(f"Cannot add more than {MAX_INT_FIELD} units at once", details={"quantity": quantity})
    return stock + quantity


def depleted_level(stock: int, quantity: int = 1) -> int:
    _require_positive(quantity)
    if stock < quantity:
        raise InsufficientStockError(requested=quantity, available=stock)
    return stock - quantity


def add_stock(drink: Drink, quantity: int) -> int:
    """Receive units of a drink. Returns the new stock level."""
    drink.stock = stocked_level(drink.stock, quantity)
    db.session.flush()
    return drink.stock


def deduct_stock(drink: Drink, quantity: int = 1) -> int:
    """Take units of a drink out of stock. Returns the new stock level."""
    drink.stock = depleted_level(drink.stock, quantity)
    db.session.flush()
    return drink.stock


def is_in_stock(drink: Drink) -> bool:
    return drink.stock > 0 and bool(drink.is_active)
