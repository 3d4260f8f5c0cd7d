"""Initial schema: users, sessions, passkeys, drinks, transactions

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Creates:
1. users (staff and member accounts, credits >= 0)
2. session_tokens (hashed bearer sessions)
3. passkeys (registered WebAuthn credentials)
4. drinks (price >= 1, stock >= 0)
5. transactions (sale / credit_addition ledger)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # 1. USERS
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('credits', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('user_type', sa.String(length=16), nullable=False, server_default='member'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.CheckConstraint('credits >= 0', name='ck_users_credits_non_negative'),
        sa.CheckConstraint(
            "user_type IN ('admin', 'seller', 'member', 'non-member')",
            name='ck_users_user_type',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_username'), ['username'], unique=True)
        batch_op.create_index('ix_users_type_active', ['user_type', 'is_active'], unique=False)

    # ==========================================================================
    # 2. SESSION TOKENS
    # ==========================================================================
    op.create_table('session_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_reason', sa.String(length=255), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_session_tokens_user_id_users'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_session_tokens')),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('session_tokens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_session_tokens_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_session_tokens_token_hash'), ['token_hash'], unique=True)

    # ==========================================================================
    # 3. PASSKEYS
    # ==========================================================================
    op.create_table('passkeys',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('credential_id', sa.Text(), nullable=False),
        sa.Column('public_key', sa.Text(), nullable=False),
        sa.Column('counter', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('transports', sa.JSON(), nullable=False),
        sa.Column('device_name', sa.String(length=100), nullable=True),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_passkeys_user_id_users'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_passkeys')),
        sa.UniqueConstraint('credential_id', name=op.f('uq_passkeys_credential_id')),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('passkeys', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_passkeys_user_id'), ['user_id'], unique=False)

    # ==========================================================================
    # 4. DRINKS
    # ==========================================================================
    op.create_table('drinks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('category', sa.String(length=64), nullable=True, server_default='beverage'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.CheckConstraint('price >= 1', name='ck_drinks_price_positive'),
        sa.CheckConstraint('stock >= 0', name='ck_drinks_stock_non_negative'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_drinks')),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('drinks', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_drinks_name'), ['name'], unique=True)
        batch_op.create_index(batch_op.f('ix_drinks_is_active'), ['is_active'], unique=False)

    # ==========================================================================
    # 5. TRANSACTIONS
    # ==========================================================================
    op.create_table('transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('drink_id', sa.Integer(), nullable=True),
        sa.Column('admin_id', sa.Integer(), nullable=False),
        sa.Column('transaction_type', sa.String(length=32), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('transaction_date', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "transaction_type IN ('sale', 'credit_addition')",
            name='ck_transactions_type',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_transactions_user_id_users'), ),
        sa.ForeignKeyConstraint(['drink_id'], ['drinks.id'], name=op.f('fk_transactions_drink_id_drinks'), ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['admin_id'], ['users.id'], name=op.f('fk_transactions_admin_id_users'), ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_transactions')),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('transactions', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_transactions_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_transactions_drink_id'), ['drink_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_transactions_admin_id'), ['admin_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_transactions_transaction_date'), ['transaction_date'], unique=False)
        batch_op.create_index('ix_transactions_type_date', ['transaction_type', 'transaction_date'], unique=False)
        batch_op.create_index('ix_transactions_user_date', ['user_id', 'transaction_date'], unique=False)


def downgrade():
    op.drop_table('transactions')
    op.drop_table('drinks')
    op.drop_table('passkeys')
    op.drop_table('session_tokens')
    op.drop_table('users')
