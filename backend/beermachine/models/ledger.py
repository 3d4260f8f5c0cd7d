from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

SALE = "sale"
CREDIT_ADDITION = "credit_addition"
TRANSACTION_TYPES = (SALE, CREDIT_ADDITION)


class Transaction(db.Model):
    """
    Ledger entry for a sale or a credit top-up.

    IMMUTABLE: rows are inserted by the sale and credit-addition services
    and deleted only by undo, which reverses their effect in the same
    database transaction. There is no update path.

    drink_id is NULL for credit additions, and is cleared if the drink
    row itself is ever removed.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.CheckConstraint(
            "transaction_type IN ('sale', 'credit_addition')",
            name="ck_transactions_type",
        ),
        db.Index("ix_transactions_type_date", "transaction_type", "transaction_date"),
        db.Index("ix_transactions_user_date", "user_id", "transaction_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Account affected
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    drink_id = db.Column(db.Integer, db.ForeignKey("drinks.id", ondelete="SET NULL"), nullable=True, index=True)
    # Staff member who performed it
    admin_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    transaction_type = db.Column(db.String(32), nullable=False)
    amount = db.Column(db.Integer, nullable=False)  # credits moved
    quantity = db.Column(db.Integer, nullable=True, default=1)  # units, sales only
    description = db.Column(db.String(255), nullable=True)
    transaction_date = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    user = db.relationship("User", foreign_keys=[user_id], backref=db.backref("transactions", lazy=True))
    admin = db.relationship("User", foreign_keys=[admin_id], backref=db.backref("processed_transactions", lazy=True))
    drink = db.relationship("Drink", backref=db.backref("transactions", lazy=True, passive_deletes=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "drink_id": self.drink_id,
            "admin_id": self.admin_id,
            "type": self.transaction_type,
            "amount": self.amount,
            "quantity": self.quantity,
            "description": self.description,
            "transaction_date": to_utc_z(self.transaction_date),
            "user": {
                "id": self.user.id,
                "username": self.user.username,
                "user_type": self.user.user_type,
            } if self.user else None,
            "admin": self.admin.to_summary() if self.admin else None,
            "drink": {
                "id": self.drink.id,
                "name": self.drink.name,
                "category": self.drink.category,
            } if self.drink else None,
        }
