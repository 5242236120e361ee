"""
Transaction Module

Immutable transaction records and the journal that owns them. Accounts and
the bank keep journal positions; the journal is the single place a record
lives, so a transfer shows up in several histories as the same object.
Ids are not used for lookups because generated ids may repeat.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Any
from enum import Enum

from .amounts import ZERO
from .exceptions import InvalidAmountError
from .identifiers import IdGenerator, UUIDIdGenerator, TRANSACTION_PREFIX
from .logging_config import get_logger, log_action


class TransactionType(Enum):
    """Kinds of money movement"""
    DEPOSIT = "deposit"        # External money into an account
    WITHDRAWAL = "withdrawal"  # Money out of an account
    TRANSFER = "transfer"      # Account to account
    FEE = "fee"                # Service fee charged to an account
    INTEREST = "interest"      # Interest credited to an account


class TransactionStatus(Enum):
    """Transactions are recorded only once they have happened"""
    COMPLETED = "completed"


# Types whose money flows into the account named by to_account_id only
_CREDIT_TYPES = {TransactionType.DEPOSIT, TransactionType.INTEREST}
# Types whose money flows out of the account named by from_account_id only
_DEBIT_TYPES = {TransactionType.WITHDRAWAL, TransactionType.FEE}


@dataclass(frozen=True)
class Transaction:
    """
    One money movement. Never changes after creation.
    """
    id: str
    transaction_type: TransactionType
    amount: Decimal
    from_account_id: Optional[str]
    to_account_id: Optional[str]
    description: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: TransactionStatus = TransactionStatus.COMPLETED
    sequence: Optional[int] = None  # Position in the owning journal

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            raise InvalidAmountError("Transaction amount must be a Decimal")

        # Interest follows the rate, which may be zero or negative
        if self.transaction_type != TransactionType.INTEREST and self.amount < ZERO:
            raise InvalidAmountError("Transaction amount must not be negative")
        if self.transaction_type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL,
                                     TransactionType.TRANSFER) and self.amount == ZERO:
            raise InvalidAmountError("Transaction amount must be positive")

        if self.transaction_type == TransactionType.TRANSFER:
            if not self.from_account_id or not self.to_account_id:
                raise ValueError("Transfer requires both from_account_id and to_account_id")
        elif self.transaction_type in _CREDIT_TYPES:
            if self.from_account_id or not self.to_account_id:
                raise ValueError(f"{self.transaction_type.value} requires only to_account_id")
        elif self.transaction_type in _DEBIT_TYPES:
            if self.to_account_id or not self.from_account_id:
                raise ValueError(f"{self.transaction_type.value} requires only from_account_id")

    @property
    def is_transfer(self) -> bool:
        return self.transaction_type == TransactionType.TRANSFER

    def signed_amount_for(self, account_id: str) -> Decimal:
        """
        Effect of this transaction on the given account's balance:
        positive for money in, negative for money out, zero if unrelated.
        """
        effect = ZERO
        if self.to_account_id == account_id:
            effect += self.amount
        if self.from_account_id == account_id:
            effect -= self.amount
        return effect

    def get_details(self) -> Dict[str, Any]:
        """Read-only view of every field"""
        return {
            "id": self.id,
            "type": self.transaction_type.value,
            "amount": self.amount,
            "from_account_id": self.from_account_id,
            "to_account_id": self.to_account_id,
            "description": self.description,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "sequence": self.sequence,
        }


class TransactionJournal:
    """
    Append-only store of every transaction created in a bank.

    Records are addressed by their sequence (position in the log), never by
    id: collisions between generated ids are not detected.
    """

    def __init__(self, id_generator: Optional[IdGenerator] = None):
        self.id_generator = id_generator or UUIDIdGenerator()
        self._entries: List[Transaction] = []
        self.logger = get_logger("retail_bank.transactions")

    def record(
        self,
        transaction_type: TransactionType,
        amount: Decimal,
        description: str,
        from_account_id: Optional[str] = None,
        to_account_id: Optional[str] = None
    ) -> Transaction:
        """
        Create a completed transaction and append it to the journal

        Returns:
            The new Transaction
        """
        transaction = Transaction(
            id=self.id_generator.next_id(TRANSACTION_PREFIX),
            transaction_type=transaction_type,
            amount=amount,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            description=description,
            sequence=len(self._entries)
        )

        self._entries.append(transaction)

        log_action(
            self.logger, "info", f"Transaction recorded: {transaction_type.value}",
            action="record_transaction", resource=f"transaction:{transaction.id}",
            extra={
                "transaction_id": transaction.id,
                "sequence": transaction.sequence,
                "transaction_type": transaction_type.value,
                "amount": str(amount),
                "from_account": from_account_id,
                "to_account": to_account_id,
            }
        )
        return transaction

    def at(self, sequence: int) -> Transaction:
        """Get the record at a journal position"""
        if not 0 <= sequence < len(self._entries):
            raise IndexError(f"No transaction at journal position {sequence}")
        return self._entries[sequence]

    def position_of(self, transaction: Transaction) -> int:
        """
        Journal position of a record created by this journal

        Raises:
            ValueError: If the record was not created by this journal
        """
        sequence = transaction.sequence
        if sequence is None or not 0 <= sequence < len(self._entries) \
                or self._entries[sequence] is not transaction:
            raise ValueError(f"Transaction {transaction.id} is not recorded in this journal")
        return sequence

    def find_by_id(self, transaction_id: str) -> List[Transaction]:
        """All records carrying this id, oldest first"""
        return [entry for entry in self._entries if entry.id == transaction_id]

    def resolve(self, sequences: Iterable[int]) -> List[Transaction]:
        """Map journal positions back to their records, keeping order"""
        return [self.at(sequence) for sequence in sequences]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._entries))
