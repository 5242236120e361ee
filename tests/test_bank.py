"""
Test suite for bank module

Tests the registry, account opening, transfers between accounts and the
periodic batch jobs run across every account.
"""

import pytest
from decimal import Decimal

from retail_bank.bank import Bank
from retail_bank.config import BankConfig
from retail_bank.exceptions import (
    AccountNotFoundError, InsufficientFundsError, InvalidAmountError,
    NotFoundError, UserNotFoundError
)
from retail_bank.identifiers import IdGenerator, SequentialIdGenerator
from retail_bank.transactions import TransactionType


class RepeatingIdGenerator(IdGenerator):
    """Hands out the same id twice before moving on"""

    def __init__(self):
        self._inner = SequentialIdGenerator()
        self._last = {}

    def next_id(self, prefix: str) -> str:
        if prefix in self._last:
            return self._last.pop(prefix)
        value = self._inner.next_id(prefix)
        self._last[prefix] = value
        return value


class TestBankRegistry:
    """Test users and account opening"""

    def setup_method(self):
        """Set up test fixtures"""
        self.bank = Bank("Modern Bank", config=BankConfig(), id_generator=SequentialIdGenerator())
        self.john = self.bank.create_user("John Doe", "john@example.com", "555-123-4567")

    def test_create_user(self):
        assert self.john.id == "USER000001"
        assert self.bank.get_user(self.john.id) is self.john

        info = self.john.get_user_info()
        assert info["name"] == "John Doe"
        assert info["email"] == "john@example.com"
        assert info["phone"] == "555-123-4567"
        assert info["account_count"] == 0

    def test_unknown_user(self):
        with pytest.raises(UserNotFoundError, match="USER999"):
            self.bank.get_user("USER999")

    def test_unknown_account(self):
        with pytest.raises(AccountNotFoundError):
            self.bank.get_account("ACCT999")

    def test_not_found_errors_share_a_base(self):
        with pytest.raises(NotFoundError):
            self.bank.get_user("nope")
        with pytest.raises(LookupError):
            self.bank.get_account("nope")

    def test_create_checking_account(self):
        account = self.bank.create_checking_account(self.john.id, 1000, 200)

        assert account.id == "ACCT000001"
        assert account.user_id == self.john.id
        assert account.is_checking
        assert account.balance == Decimal('1000')
        assert account.terms.overdraft_limit == Decimal('200')
        assert account.terms.monthly_fee == Decimal('5.00')
        assert self.bank.get_account(account.id) is account
        assert self.bank.get_user_accounts(self.john.id) == [account]
        assert account.get_transaction_history() == []

    def test_create_savings_account_defaults(self):
        account = self.bank.create_savings_account(self.john.id)

        assert account.is_savings
        assert account.balance == Decimal('0')
        assert account.terms.interest_rate == Decimal('0.5')
        assert account.terms.monthly_withdrawal_limit == 6
        assert account.terms.withdrawals_this_month == 0

    def test_checking_default_overdraft(self):
        account = self.bank.create_checking_account(self.john.id, 2500)

        assert account.terms.overdraft_limit == Decimal('0')

    def test_negative_opening_balance_accepted(self):
        account = self.bank.create_checking_account(self.john.id, -50)

        assert account.balance == Decimal('-50')

    def test_account_for_unknown_user(self):
        """Opening an account for an unknown user registers nothing"""
        with pytest.raises(UserNotFoundError):
            self.bank.create_checking_account("USER999", 100)
        with pytest.raises(UserNotFoundError):
            self.bank.create_savings_account("USER999", 100)

        assert self.bank.accounts == {}
        assert self.john.get_accounts() == []

    def test_get_user_accounts(self):
        checking = self.bank.create_checking_account(self.john.id, 100)
        savings = self.bank.create_savings_account(self.john.id, 200)

        assert self.bank.get_user_accounts(self.john.id) == [checking, savings]
        assert self.john.get_user_info()["account_count"] == 2
        with pytest.raises(UserNotFoundError):
            self.bank.get_user_accounts("USER999")

    def test_ids_never_reused(self):
        bank = Bank("Echo Bank", config=BankConfig(), id_generator=RepeatingIdGenerator())
        first = bank.create_user("A", "a@example.com", "1")
        second = bank.create_user("B", "b@example.com", "2")
        account_one = bank.create_savings_account(first.id)
        account_two = bank.create_savings_account(second.id)

        assert first.id != second.id
        assert account_one.id != account_two.id
        assert len(bank.users) == 2
        assert len(bank.accounts) == 2

    def test_config_defaults_used(self):
        config = BankConfig(
            checking_monthly_fee="12.50",
            checking_default_overdraft_limit="100",
            savings_default_interest_rate="2",
            savings_monthly_withdrawal_limit=3,
            amount_precision=2
        )
        bank = Bank("Configured Bank", config=config, id_generator=SequentialIdGenerator())
        user = bank.create_user("Jane Smith", "jane@example.com", "555-765-4321")

        checking = bank.create_checking_account(user.id, 0)
        savings = bank.create_savings_account(user.id, 1000)

        assert checking.terms.monthly_fee == Decimal('12.50')
        assert checking.terms.overdraft_limit == Decimal('100')
        assert savings.terms.interest_rate == Decimal('2')
        assert savings.terms.monthly_withdrawal_limit == 3
        assert savings.apply_interest().amount == Decimal('1.67')

    def test_id_strategy_from_config(self):
        bank = Bank("Sequential Bank", config=BankConfig(id_strategy="sequential"))

        assert bank.create_user("A", "a@example.com", "1").id == "USER000001"


class TestTransfers:
    """Test transfers between accounts"""

    def setup_method(self):
        """Set up test fixtures"""
        self.bank = Bank("Modern Bank", config=BankConfig(), id_generator=SequentialIdGenerator())
        john = self.bank.create_user("John Doe", "john@example.com", "555-123-4567")
        jane = self.bank.create_user("Jane Smith", "jane@example.com", "555-765-4321")
        self.savings = self.bank.create_savings_account(john.id, 5000, 1.25)
        self.checking = self.bank.create_checking_account(jane.id, 2500)

    def test_transfer_shares_one_transaction(self):
        """One record, visible in both histories and the bank log"""
        transaction = self.bank.transfer_money(self.savings.id, self.checking.id, 1500)

        assert self.savings.balance == Decimal('3500')
        assert self.checking.balance == Decimal('4000')
        assert transaction.transaction_type == TransactionType.TRANSFER
        assert transaction.from_account_id == self.savings.id
        assert transaction.to_account_id == self.checking.id

        for history in (self.savings.get_transaction_history(),
                        self.checking.get_transaction_history(),
                        self.bank.get_transaction_history()):
            assert len(history) == 1
            assert history[0] is transaction
        assert len(self.bank.journal) == 1

    def test_transfer_bypasses_savings_withdrawal_limit(self):
        self.savings.terms.withdrawals_this_month = 6

        self.bank.transfer_money(self.savings.id, self.checking.id, 100)

        assert self.savings.balance == Decimal('4900')
        assert self.savings.terms.withdrawals_this_month == 6

    def test_transfer_insufficient_funds(self):
        with pytest.raises(InsufficientFundsError, match="transfer"):
            self.bank.transfer_money(self.savings.id, self.checking.id, Decimal('5000.01'))

        assert self.savings.balance == Decimal('5000')
        assert self.checking.balance == Decimal('2500')
        assert self.bank.get_transaction_history() == []
        assert len(self.bank.journal) == 0

    def test_transfer_ignores_overdraft(self):
        """Only the raw balance counts, not balance plus overdraft"""
        user = self.bank.create_user("Sam Lee", "sam@example.com", "555-000-0000")
        overdraft = self.bank.create_checking_account(user.id, 100, 500)

        with pytest.raises(InsufficientFundsError):
            self.bank.transfer_money(overdraft.id, self.savings.id, 150)

        # A direct withdrawal of the same amount is allowed
        overdraft.withdraw(150)
        assert overdraft.balance == Decimal('-50')

    @pytest.mark.parametrize("amount", [0, -10])
    def test_transfer_invalid_amount(self, amount):
        with pytest.raises(InvalidAmountError, match="Transfer amount must be positive"):
            self.bank.transfer_money(self.savings.id, self.checking.id, amount)

    def test_amount_checked_before_accounts(self):
        with pytest.raises(InvalidAmountError):
            self.bank.transfer_money("ACCT999", "ACCT998", 0)

    def test_transfer_unknown_accounts(self):
        with pytest.raises(AccountNotFoundError):
            self.bank.transfer_money("ACCT999", self.checking.id, 10)
        with pytest.raises(AccountNotFoundError):
            self.bank.transfer_money(self.savings.id, "ACCT999", 10)

        assert self.savings.balance == Decimal('5000')
        assert self.checking.balance == Decimal('2500')

    def test_deposits_stay_out_of_bank_log(self):
        self.checking.deposit(100)
        self.savings.withdraw(100)

        assert self.bank.get_transaction_history() == []
        assert len(self.bank.journal) == 2


class TestRepeatedTransactionIds:
    """Histories stay correct when the generator repeats transaction ids"""

    def setup_method(self):
        """Set up test fixtures"""
        self.bank = Bank("Echo Bank", config=BankConfig(), id_generator=RepeatingIdGenerator())
        user = self.bank.create_user("John Doe", "john@example.com", "555-123-4567")
        self.first = self.bank.create_checking_account(user.id, 100)
        self.second = self.bank.create_checking_account(user.id, 100)

    def _assert_history_matches_balance(self, account):
        net = sum(
            (transaction.signed_amount_for(account.id)
             for transaction in account.get_transaction_history()),
            Decimal('0')
        )
        assert account.balance == account.opening_balance + net

    def test_account_histories_keep_their_own_records(self):
        deposit = self.first.deposit(50)
        withdrawal = self.second.withdraw(10)

        assert deposit.id == withdrawal.id
        assert self.first.get_transaction_history() == [deposit]
        assert self.second.get_transaction_history() == [withdrawal]
        assert self.first.get_account_info()["transaction_count"] == 1
        self._assert_history_matches_balance(self.first)
        self._assert_history_matches_balance(self.second)
        assert self.bank.journal.find_by_id(deposit.id) == [deposit, withdrawal]

    def test_transfer_and_bank_log_keep_their_own_records(self):
        self.first.deposit(50)
        transfer = self.bank.transfer_money(self.first.id, self.second.id, 30)
        fees = self.bank.apply_monthly_fees_to_all_checking_accounts()

        # The transfer reuses the deposit's id
        assert transfer.id == self.first.get_transaction_history()[0].id
        assert self.bank.get_transaction_history() == [transfer] + fees
        assert self.second.get_transaction_history() == [transfer, fees[1]]
        assert self.first.balance == Decimal('115')
        assert self.second.balance == Decimal('125')
        self._assert_history_matches_balance(self.first)
        self._assert_history_matches_balance(self.second)


class TestBatchJobs:
    """Test interest, fee and reset jobs across all accounts"""

    def setup_method(self):
        """Set up test fixtures"""
        self.bank = Bank("Modern Bank", config=BankConfig(), id_generator=SequentialIdGenerator())
        user = self.bank.create_user("John Doe", "john@example.com", "555-123-4567")
        self.checking = self.bank.create_checking_account(user.id, 1000, 200)
        self.savings_a = self.bank.create_savings_account(user.id, 1000, 1.25)
        self.savings_b = self.bank.create_savings_account(user.id, 2400, 0.5)

    def test_apply_interest_to_all_savings_accounts(self):
        transactions = self.bank.apply_interest_to_all_savings_accounts()

        assert len(transactions) == 2
        assert {t.to_account_id for t in transactions} == {self.savings_a.id, self.savings_b.id}
        assert all(t.transaction_type == TransactionType.INTEREST for t in transactions)
        assert self.savings_a.balance == Decimal('1001.0417')
        assert self.savings_b.balance == Decimal('2401.0000')
        assert self.checking.balance == Decimal('1000')
        assert self.bank.get_transaction_history() == transactions

    def test_apply_monthly_fees_to_all_checking_accounts(self):
        transactions = self.bank.apply_monthly_fees_to_all_checking_accounts()

        assert len(transactions) == 1
        assert transactions[0].from_account_id == self.checking.id
        assert self.checking.balance == Decimal('995.00')
        assert self.savings_a.balance == Decimal('1000')
        assert self.bank.get_transaction_history() == transactions

    def test_reset_all_savings_account_withdrawal_limits(self):
        for _ in range(6):
            self.savings_a.withdraw(1)
        self.savings_b.withdraw(1)

        result = self.bank.reset_all_savings_account_withdrawal_limits()

        assert result is None
        assert self.savings_a.terms.withdrawals_this_month == 0
        assert self.savings_b.terms.withdrawals_this_month == 0
        self.savings_a.withdraw(1)

    def test_batch_on_empty_bank(self):
        bank = Bank("Empty Bank", config=BankConfig())

        assert bank.apply_interest_to_all_savings_accounts() == []
        assert bank.apply_monthly_fees_to_all_checking_accounts() == []
        bank.reset_all_savings_account_withdrawal_limits()
