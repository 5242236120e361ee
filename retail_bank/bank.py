"""
Bank Module

Top-level registry of users and accounts. The bank is the only component
that works across accounts: transfers and the periodic batch jobs (interest,
fees, withdrawal-limit resets) go through it.
"""

from typing import Callable, Dict, List, Optional

from .accounts import Account, AccountTerms, CheckingTerms, SavingsTerms
from .amounts import require_positive, to_decimal
from .config import BankConfig, get_config
from .exceptions import AccountNotFoundError, InsufficientFundsError, UserNotFoundError
from .identifiers import (
    IdGenerator, create_id_generator, ACCOUNT_PREFIX, USER_PREFIX
)
from .logging_config import get_logger, log_action
from .transactions import Transaction, TransactionJournal, TransactionType
from .users import User


class Bank:
    """
    In-memory bank

    Every account in the registry belongs to a registered user, and an id
    handed out for a user or account is never handed out again.
    """

    def __init__(
        self,
        name: str,
        config: Optional[BankConfig] = None,
        id_generator: Optional[IdGenerator] = None
    ):
        self.name = name
        self.config = config or get_config()
        self.id_generator = id_generator or create_id_generator(self.config.id_strategy)
        self.journal = TransactionJournal(self.id_generator)

        self.users: Dict[str, User] = {}
        self.accounts: Dict[str, Account] = {}
        # Journal positions of transactions the bank recorded itself: transfers and batch jobs
        self.journal_positions: List[int] = []

        self.logger = get_logger("retail_bank.bank")

    def create_user(self, name: str, email: str, phone: str) -> User:
        """Register a new user"""
        user = User(
            id=self._allocate_id(USER_PREFIX, self.users),
            name=name,
            email=email,
            phone=phone
        )
        self.users[user.id] = user

        log_action(
            self.logger, "info", "User created",
            user_id=user.id, action="create_user", resource=f"user:{user.id}",
            extra={"name": name, "email": email}
        )
        return user

    def get_user(self, user_id: str) -> User:
        """
        Get a user by ID

        Raises:
            UserNotFoundError: If the user is not registered
        """
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def get_account(self, account_id: str) -> Account:
        """
        Get an account by ID

        Raises:
            AccountNotFoundError: If the account is not registered
        """
        account = self.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    def create_checking_account(
        self,
        user_id: str,
        initial_deposit=0,
        overdraft_limit=None
    ) -> Account:
        """
        Open a checking account for a user

        Args:
            user_id: Owner of the account
            initial_deposit: Opening balance, taken as-is
            overdraft_limit: How far below zero the balance may go
                (configured default if omitted)
        """
        if overdraft_limit is None:
            overdraft_limit = self.config.checking_default_overdraft_limit
        terms = CheckingTerms(
            overdraft_limit=to_decimal(overdraft_limit),
            monthly_fee=to_decimal(self.config.checking_monthly_fee)
        )
        return self._open_account(user_id, initial_deposit, terms)

    def create_savings_account(
        self,
        user_id: str,
        initial_deposit=0,
        interest_rate=None
    ) -> Account:
        """
        Open a savings account for a user

        Args:
            user_id: Owner of the account
            initial_deposit: Opening balance, taken as-is
            interest_rate: Annual percentage rate (configured default if omitted)
        """
        if interest_rate is None:
            interest_rate = self.config.savings_default_interest_rate
        terms = SavingsTerms(
            interest_rate=to_decimal(interest_rate),
            monthly_withdrawal_limit=self.config.savings_monthly_withdrawal_limit
        )
        return self._open_account(user_id, initial_deposit, terms)

    def transfer_money(self, from_account_id: str, to_account_id: str, amount) -> Transaction:
        """
        Move money between two accounts

        Only the source's raw balance is checked: the source product's own
        withdrawal rules (overdraft, withdrawal limit) do not apply. One
        transaction is created and listed in both accounts' histories and in
        the bank's log.

        Raises:
            InvalidAmountError: If amount is not positive
            AccountNotFoundError: If either account is unknown
            InsufficientFundsError: If the source balance is below amount
        """
        amount = require_positive(amount, "Transfer amount")
        from_account = self.get_account(from_account_id)
        to_account = self.get_account(to_account_id)

        if from_account.balance < amount:
            raise InsufficientFundsError(
                f"Insufficient funds for transfer: balance {from_account.balance}, "
                f"requested {amount}"
            )

        from_account.balance -= amount
        to_account.balance += amount

        transaction = self.journal.record(
            TransactionType.TRANSFER, amount, "Transfer between accounts",
            from_account_id=from_account_id, to_account_id=to_account_id
        )
        from_account.record_transaction(transaction)
        to_account.record_transaction(transaction)
        self.journal_positions.append(self.journal.position_of(transaction))

        log_action(
            self.logger, "info", f"Transfer completed: {amount}",
            user_id=from_account.user_id, action="transfer_money",
            resource=f"transaction:{transaction.id}",
            extra={
                "from_account": from_account_id,
                "to_account": to_account_id,
                "amount": str(amount),
            }
        )
        return transaction

    def get_user_accounts(self, user_id: str) -> List[Account]:
        """Get all accounts for a user"""
        return self.get_user(user_id).get_accounts()

    def apply_interest_to_all_savings_accounts(self) -> List[Transaction]:
        """Apply one month of interest to every savings account"""
        return self._run_batch("apply_interest_to_all_savings_accounts",
                               lambda account: account.is_savings,
                               Account.apply_interest)

    def apply_monthly_fees_to_all_checking_accounts(self) -> List[Transaction]:
        """Charge the monthly fee on every checking account"""
        return self._run_batch("apply_monthly_fees_to_all_checking_accounts",
                               lambda account: account.is_checking,
                               Account.apply_monthly_fee)

    def reset_all_savings_account_withdrawal_limits(self) -> None:
        """Start a new withdrawal cycle on every savings account"""
        count = 0
        for account in self.accounts.values():
            if account.is_savings:
                account.reset_monthly_withdrawals()
                count += 1

        log_action(
            self.logger, "info", "Savings withdrawal limits reset",
            action="reset_all_savings_account_withdrawal_limits",
            extra={"accounts": count}
        )

    def get_transaction_history(self) -> List[Transaction]:
        """Transactions the bank recorded itself, oldest first"""
        return self.journal.resolve(self.journal_positions)

    def _open_account(self, user_id: str, initial_deposit, terms: AccountTerms) -> Account:
        user = self.get_user(user_id)

        account = Account(
            id=self._allocate_id(ACCOUNT_PREFIX, self.accounts),
            user_id=user_id,
            terms=terms,
            journal=self.journal,
            balance=to_decimal(initial_deposit),
            precision=self.config.amount_precision
        )
        self.accounts[account.id] = account
        user.add_account(account)

        log_action(
            self.logger, "info", f"Account created: {account.product_type.value}",
            user_id=user_id, action="create_account", resource=f"account:{account.id}",
            extra={
                "product_type": account.product_type.value,
                "opening_balance": str(account.balance),
                **{key: str(value) for key, value in terms.info().items()}
            }
        )
        return account

    def _run_batch(
        self,
        action: str,
        selector: Callable[[Account], bool],
        operation: Callable[[Account], Transaction]
    ) -> List[Transaction]:
        transactions = []
        for account in list(self.accounts.values()):
            if selector(account):
                transaction = operation(account)
                transactions.append(transaction)
                self.journal_positions.append(self.journal.position_of(transaction))

        log_action(
            self.logger, "info", f"Batch {action} applied to {len(transactions)} accounts",
            action=action, extra={"accounts": len(transactions)}
        )
        return transactions

    def _allocate_id(self, prefix: str, registry: Dict[str, object]) -> str:
        # Generators may repeat ids (timestamp strategy); registry ids must not
        while True:
            candidate = self.id_generator.next_id(prefix)
            if candidate not in registry:
                return candidate
