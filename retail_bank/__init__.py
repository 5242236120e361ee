"""
Retail Bank Ledger

An in-memory retail banking ledger: users, checking and savings accounts,
and the transactions that move money between them. All amounts use Decimal.
"""

__version__ = "1.0.0"

from .accounts import Account, ProductType, CheckingTerms, SavingsTerms
from .bank import Bank
from .exceptions import (
    BankingError, InvalidAmountError, InsufficientFundsError,
    OverdraftExceededError, WithdrawalLimitReachedError, NotFoundError,
    UserNotFoundError, AccountNotFoundError, UnsupportedOperationError
)
from .transactions import Transaction, TransactionType, TransactionStatus, TransactionJournal
from .users import User

__all__ = [
    "Account", "ProductType", "CheckingTerms", "SavingsTerms",
    "Bank",
    "BankingError", "InvalidAmountError", "InsufficientFundsError",
    "OverdraftExceededError", "WithdrawalLimitReachedError", "NotFoundError",
    "UserNotFoundError", "AccountNotFoundError", "UnsupportedOperationError",
    "Transaction", "TransactionType", "TransactionStatus", "TransactionJournal",
    "User",
]
