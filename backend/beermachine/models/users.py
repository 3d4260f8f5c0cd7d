from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

USER_TYPES = ("admin", "seller", "member", "non-member")
STAFF_TYPES = ("admin", "seller")
ACCOUNT_TYPES = ("member", "non-member")


class User(db.Model):
    """
    Staff and member accounts.

    Staff (admin, seller) log in and operate the till. Members and
    non-members are ledger-only accounts: they hold a credit balance
    but have no password and can never authenticate.

    INVARIANT: credits >= 0, enforced both by the balance services and
    by a CHECK constraint.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),
        db.CheckConstraint(
            "user_type IN ('admin', 'seller', 'member', 'non-member')",
            name="ck_users_user_type",
        ),
        db.Index("ix_users_type_active", "user_type", "is_active"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), nullable=False, unique=True, index=True)

    # Bcrypt hash; NULL for members and non-members
    password_hash = db.Column(db.String(255), nullable=True)

    credits = db.Column(db.Integer, nullable=False, default=0)
    date_of_birth = db.Column(db.Date, nullable=True)
    user_type = db.Column(db.String(16), nullable=False, default="member")
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
    version_id = db.Column(db.Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_staff(self) -> bool:
        return self.user_type in STAFF_TYPES

    def can_login(self) -> bool:
        return self.is_staff and self.password_hash is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "credits": self.credits,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "user_type": self.user_type,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }

    def to_summary(self) -> dict:
        return {"id": self.id, "username": self.username}


class SessionToken(db.Model):
    """
    Bearer session for a logged-in staff member.

    Only the SHA-256 hash of the token is stored; the plaintext is handed
    to the client once at login.
    """
    __tablename__ = "session_tokens"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = db.Column(db.String(64), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)
    revoked_reason = db.Column(db.String(255), nullable=True)

    user_agent = db.Column(db.String(512), nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)

    user = db.relationship("User", backref=db.backref("sessions", lazy=True, passive_deletes=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": to_utc_z(self.created_at),
            "last_used_at": to_utc_z(self.last_used_at),
            "expires_at": to_utc_z(self.expires_at),
            "is_revoked": self.is_revoked,
        }


class Passkey(db.Model):
    """WebAuthn credential registered by a staff member."""
    __tablename__ = "passkeys"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    credential_id = db.Column(db.Text, nullable=False, unique=True)
    public_key = db.Column(db.Text, nullable=False)
    counter = db.Column(db.BigInteger, nullable=False, default=0)
    transports = db.Column(db.JSON, nullable=False, default=list)
    device_name = db.Column(db.String(100), nullable=True)
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship(
        "User",
        backref=db.backref("passkeys", lazy=True, cascade="all, delete-orphan", passive_deletes=True),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "credential_id": self.credential_id,
            "transports": self.transports or [],
            "device_name": self.device_name,
            "counter": self.counter,
            "last_used_at": to_utc_z(self.last_used_at) if self.last_used_at else None,
            "created_at": to_utc_z(self.created_at),
        }
