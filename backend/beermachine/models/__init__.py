from .users import User, SessionToken, Passkey, USER_TYPES, STAFF_TYPES, ACCOUNT_TYPES
from .drinks import Drink
from .ledger import Transaction, SALE, CREDIT_ADDITION, TRANSACTION_TYPES

__all__ = [
    'User', 'SessionToken', 'Passkey',
    'Drink',
    'Transaction',
    'USER_TYPES', 'STAFF_TYPES', 'ACCOUNT_TYPES',
    'SALE', 'CREDIT_ADDITION', 'TRANSACTION_TYPES',
]
