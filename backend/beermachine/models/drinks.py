from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class Drink(db.Model):
    """
    A sellable item priced in credits.

    INVARIANTS: price >= 1, stock >= 0. Drinks are soft-deleted
    (is_active=False) so historical sales keep their reference.
    """
    __tablename__ = "drinks"
    __table_args__ = (
        db.CheckConstraint("price >= 1", name="ck_drinks_price_positive"),
        db.CheckConstraint("stock >= 0", name="ck_drinks_stock_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=True)

    # Price in credits
    price = db.Column(db.Integer, nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    category = db.Column(db.String(64), nullable=True, default="beverage")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "is_active": self.is_active,
            "category": self.category,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
