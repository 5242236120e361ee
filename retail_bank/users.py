"""
User Module

Bank customers and the accounts they own.
"""

from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .accounts import Account


@dataclass
class User:
    """Bank customer. Holds references to accounts registered in the bank."""
    id: str
    name: str
    email: str
    phone: str
    accounts: List['Account'] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add_account(self, account: 'Account') -> None:
        """Append an account; adding the same account twice lists it twice"""
        self.accounts.append(account)

    def get_accounts(self) -> List['Account']:
        return self.accounts

    def get_user_info(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "account_count": len(self.accounts),
            "created_at": self.created_at,
        }
