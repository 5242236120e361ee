"""Ledger exceptions raised at the point a business rule is violated"""


class BankingError(ValueError):
    """Base exception for ledger operations"""

    pass


class InvalidAmountError(BankingError):
    """Amount is zero, negative or not a number"""

    pass


class InsufficientFundsError(BankingError):
    """Withdrawal or transfer exceeds the available balance"""

    pass


class OverdraftExceededError(InsufficientFundsError):
    """Checking withdrawal exceeds balance plus overdraft limit"""

    pass


class WithdrawalLimitReachedError(BankingError):
    """Savings account already used its withdrawals for this cycle"""

    pass


class NotFoundError(BankingError, LookupError):
    """Lookup of an unknown identifier"""

    pass


class UserNotFoundError(NotFoundError):
    pass


class AccountNotFoundError(NotFoundError):
    pass


class UnsupportedOperationError(BankingError):
    """Operation does not apply to this account's product type"""

    pass
