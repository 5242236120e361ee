"""
Account Management Module

Accounts hold a balance and the journal positions of their transactions. The two deposit
products, checking and savings, share one Account class; what differs between
them lives in a terms object (CheckingTerms or SavingsTerms) that decides
withdrawal eligibility and carries the product's periodic operations.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Union
from enum import Enum

from .amounts import ZERO, quantize_amount, require_positive, to_decimal
from .exceptions import (
    InsufficientFundsError, InvalidAmountError, OverdraftExceededError,
    UnsupportedOperationError, WithdrawalLimitReachedError
)
from .logging_config import get_logger, log_action
from .transactions import Transaction, TransactionJournal, TransactionType


logger = get_logger("retail_bank.accounts")


class ProductType(Enum):
    """Banking product types"""
    CHECKING = "checking"
    SAVINGS = "savings"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CheckingTerms:
    """
    Checking product: may go below zero down to the overdraft limit and pays
    a fixed monthly fee.
    """
    overdraft_limit: Decimal = ZERO
    monthly_fee: Decimal = Decimal('5.00')

    product_type: ClassVar[ProductType] = ProductType.CHECKING

    def __post_init__(self):
        self.overdraft_limit = to_decimal(self.overdraft_limit)
        self.monthly_fee = to_decimal(self.monthly_fee)
        if self.overdraft_limit < ZERO:
            raise InvalidAmountError("Overdraft limit must not be negative")
        if self.monthly_fee < ZERO:
            raise InvalidAmountError("Monthly fee must not be negative")

    def before_withdrawal(self) -> None:
        pass

    def available_balance(self, balance: Decimal) -> Decimal:
        return balance + self.overdraft_limit

    def check_funds(self, balance: Decimal, amount: Decimal) -> None:
        if amount > self.available_balance(balance):
            raise OverdraftExceededError(
                f"Withdrawal of {amount} exceeds available balance and overdraft limit "
                f"(balance {balance}, overdraft limit {self.overdraft_limit})"
            )

    def after_withdrawal(self) -> None:
        pass

    def info(self) -> Dict[str, Any]:
        return {
            "overdraft_limit": self.overdraft_limit,
            "monthly_fee": self.monthly_fee,
        }


@dataclass
class SavingsTerms:
    """
    Savings product: never overdrawn, a capped number of withdrawals per
    cycle, and monthly simple interest from an annual percentage rate.

    The withdrawal counter is only reset by an explicit call; there is no
    calendar check.
    """
    interest_rate: Decimal = Decimal('0.5')  # Annual percentage, 1.25 means 1.25%
    monthly_withdrawal_limit: int = 6
    withdrawals_this_month: int = 0
    last_interest_application_date: datetime = field(default_factory=_utcnow)

    product_type: ClassVar[ProductType] = ProductType.SAVINGS

    def __post_init__(self):
        self.interest_rate = to_decimal(self.interest_rate)

    def before_withdrawal(self) -> None:
        if self.withdrawals_this_month >= self.monthly_withdrawal_limit:
            raise WithdrawalLimitReachedError(
                f"Monthly withdrawal limit of {self.monthly_withdrawal_limit} reached"
            )

    def available_balance(self, balance: Decimal) -> Decimal:
        return balance

    def check_funds(self, balance: Decimal, amount: Decimal) -> None:
        if amount > balance:
            raise InsufficientFundsError(
                f"Insufficient funds: available {balance}, requested {amount}"
            )

    def after_withdrawal(self) -> None:
        self.withdrawals_this_month += 1

    def monthly_interest(self, balance: Decimal, precision: int) -> Decimal:
        """balance * (annual rate / 12 / 100), rounded to precision places"""
        monthly_rate = self.interest_rate / Decimal('12') / Decimal('100')
        return quantize_amount(balance * monthly_rate, precision)

    def info(self) -> Dict[str, Any]:
        return {
            "interest_rate": self.interest_rate,
            "monthly_withdrawal_limit": self.monthly_withdrawal_limit,
            "withdrawals_this_month": self.withdrawals_this_month,
            "last_interest_application_date": self.last_interest_application_date,
        }


AccountTerms = Union[CheckingTerms, SavingsTerms]


@dataclass
class Account:
    """
    Deposit account. The balance always equals the opening balance plus the
    signed sum of the transactions at journal_positions.
    """
    id: str
    user_id: str
    terms: AccountTerms
    journal: TransactionJournal = field(repr=False, compare=False)
    balance: Decimal = ZERO
    open_date: datetime = field(default_factory=_utcnow)
    is_active: bool = True
    precision: int = 4
    journal_positions: List[int] = field(default_factory=list)

    def __post_init__(self):
        self.balance = to_decimal(self.balance)
        self.opening_balance = self.balance

    @property
    def product_type(self) -> ProductType:
        return self.terms.product_type

    @property
    def is_checking(self) -> bool:
        return self.product_type == ProductType.CHECKING

    @property
    def is_savings(self) -> bool:
        return self.product_type == ProductType.SAVINGS

    @property
    def available_balance(self) -> Decimal:
        """Largest amount withdraw() would currently accept"""
        return self.terms.available_balance(self.balance)

    def record_transaction(self, transaction: Transaction) -> None:
        """Add a transaction from this account's journal to its history"""
        self.journal_positions.append(self.journal.position_of(transaction))

    def deposit(self, amount) -> Transaction:
        """
        Deposit money into the account

        Raises:
            InvalidAmountError: If amount is not positive
        """
        amount = require_positive(amount, "Deposit amount")

        self.balance += amount
        transaction = self.journal.record(
            TransactionType.DEPOSIT, amount, "Deposit into account",
            to_account_id=self.id
        )
        self.record_transaction(transaction)

        self._log("deposit", transaction)
        return transaction

    def withdraw(self, amount) -> Transaction:
        """
        Withdraw money from the account

        Savings accounts check the monthly withdrawal limit before anything
        else, and only count withdrawals that succeed.

        Raises:
            WithdrawalLimitReachedError: Savings cap reached for this cycle
            InvalidAmountError: If amount is not positive
            OverdraftExceededError: Checking amount above balance + overdraft
            InsufficientFundsError: Savings amount above balance
        """
        self.terms.before_withdrawal()
        amount = require_positive(amount, "Withdrawal amount")
        self.terms.check_funds(self.balance, amount)

        self.balance -= amount
        transaction = self.journal.record(
            TransactionType.WITHDRAWAL, amount, "Withdrawal from account",
            from_account_id=self.id
        )
        self.record_transaction(transaction)
        self.terms.after_withdrawal()

        self._log("withdraw", transaction)
        return transaction

    def apply_monthly_fee(self) -> Transaction:
        """
        Charge the checking monthly fee. No funds check: the fee may take the
        balance past the overdraft limit.
        """
        terms = self._require_checking("apply_monthly_fee")

        self.balance -= terms.monthly_fee
        transaction = self.journal.record(
            TransactionType.FEE, terms.monthly_fee, "Monthly maintenance fee",
            from_account_id=self.id
        )
        self.record_transaction(transaction)

        self._log("apply_monthly_fee", transaction)
        return transaction

    def apply_interest(self) -> Transaction:
        """Credit one month of simple interest to a savings account"""
        terms = self._require_savings("apply_interest")

        interest = terms.monthly_interest(self.balance, self.precision)
        self.balance += interest
        transaction = self.journal.record(
            TransactionType.INTEREST, interest, "Monthly interest",
            to_account_id=self.id
        )
        self.record_transaction(transaction)
        terms.last_interest_application_date = transaction.timestamp

        self._log("apply_interest", transaction)
        return transaction

    def reset_monthly_withdrawals(self) -> None:
        """Start a new withdrawal cycle for a savings account"""
        terms = self._require_savings("reset_monthly_withdrawals")
        terms.withdrawals_this_month = 0

        log_action(
            logger, "info", "Monthly withdrawals reset",
            user_id=self.user_id, action="reset_monthly_withdrawals",
            resource=f"account:{self.id}"
        )

    def get_account_info(self) -> Dict[str, Any]:
        """Snapshot of the account, including product-specific fields"""
        info = {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.product_type.value,
            "balance": self.balance,
            "open_date": self.open_date,
            "is_active": self.is_active,
            "transaction_count": len(self.journal_positions),
        }
        info.update(self.terms.info())
        return info

    def get_transaction_history(self) -> List[Transaction]:
        """All transactions for this account, oldest first"""
        return self.journal.resolve(self.journal_positions)

    def _require_checking(self, operation: str) -> CheckingTerms:
        if not isinstance(self.terms, CheckingTerms):
            raise UnsupportedOperationError(
                f"{operation} is only available on checking accounts, "
                f"account {self.id} is {self.product_type.value}"
            )
        return self.terms

    def _require_savings(self, operation: str) -> SavingsTerms:
        if not isinstance(self.terms, SavingsTerms):
            raise UnsupportedOperationError(
                f"{operation} is only available on savings accounts, "
                f"account {self.id} is {self.product_type.value}"
            )
        return self.terms

    def _log(self, action: str, transaction: Transaction) -> None:
        log_action(
            logger, "info", f"Account {action}: {transaction.amount}",
            user_id=self.user_id, action=action, resource=f"account:{self.id}",
            extra={
                "transaction_id": transaction.id,
                "amount": str(transaction.amount),
                "balance": str(self.balance),
            }
        )
