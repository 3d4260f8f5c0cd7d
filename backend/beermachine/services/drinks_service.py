# backend/beermachine/services/drinks_service.py
"""
Drink catalogue management.

Stock is only ever changed through stock_service (add-stock, sales and
undo) once a drink exists; the update path here sets it directly for
stock-take corrections.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Drink
from ..validation import ConflictError
from .concurrency import run_atomically
from .errors import NotFoundError
from .sales_service import load_locked
from .stock_service import add_stock

DRINK_MUTABLE_FIELDS = {"name", "description", "price", "stock", "category", "is_active"}


def apply_drink_patch(drink: Drink, patch: dict) -> None:
    for k, v in patch.items():
        if k not in DRINK_MUTABLE_FIELDS:
            continue
        setattr(drink, k, v)


def _ensure_unique_name(name: str, exclude_id: int | None = None) -> None:
    query = db.session.query(Drink).filter(Drink.name == name)
    if exclude_id is not None:
        query = query.filter(Drink.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("Drink with this name already exists")


def list_drinks() -> list[Drink]:
    return db.session.query(Drink).order_by(Drink.name.asc(), Drink.id.asc()).all()


def get_drink(drink_id: int) -> Drink:
    drink = db.session.get(Drink, drink_id)
    if drink is None:
        raise NotFoundError("Drink not found", details={"drink_id": drink_id})
    return drink


def create_drink(*, patch: dict) -> Drink:
    """Create a drink from a validated patch dict."""
    _ensure_unique_name(patch["name"])

    drink = Drink(stock=0, category="beverage", is_active=True)
    apply_drink_patch(drink, patch)
    db.session.add(drink)
    db.session.commit()
    return drink


def update_drink(drink_id: int, *, patch: dict) -> Drink:
    drink = get_drink(drink_id)
    if "name" in patch and patch["name"] != drink.name:
        _ensure_unique_name(patch["name"], exclude_id=drink.id)

    apply_drink_patch(drink, patch)
    db.session.commit()
    return drink


def restock_drink(drink_id: int, quantity: int) -> Drink:
    """Add units to a drink's stock under a row lock."""
    def _op() -> Drink:
        drink = load_locked(Drink, drink_id, "Drink")
        add_stock(drink, quantity)
        return drink

    return run_atomically(_op)


def deactivate_drink(drink_id: int) -> Drink:
    """Soft delete: the drink stays referenced by historical sales."""
    drink = get_drink(drink_id)
    drink.is_active = False
    db.session.commit()
    return drink
