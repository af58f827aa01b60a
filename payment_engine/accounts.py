"""
Account Registry

Maps client ids to account balances. Accounts are opened on the first record
that mentions a client and are never deleted.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .amount import Amount

# Client ids are unsigned 16-bit integers
MAX_CLIENT_ID = 2 ** 16 - 1


@dataclass
class Account:
    """
    Client account balances

    Only PaymentEngine mutates an account, and never once it is locked
    (except for the chargeback that locks it).
    """
    client: int
    available: Amount = field(default_factory=Amount.zero)  # Usable for withdrawal
    held: Amount = field(default_factory=Amount.zero)       # Frozen by open disputes
    locked: bool = False                                    # Set by a chargeback, permanent

    def __post_init__(self):
        if not 0 <= self.client <= MAX_CLIENT_ID:
            raise ValueError(f"Client id {self.client} out of range")

    @property
    def total(self) -> Amount:
        """Available plus held funds"""
        return self.available + self.held

    def to_dict(self) -> Dict[str, str]:
        """Output row for this account"""
        return {
            'client': str(self.client),
            'available': self.available.to_string(),
            'held': self.held.to_string(),
            'total': self.total.to_string(),
            'locked': 'true' if self.locked else 'false'
        }


class AccountRegistry:
    """
    Holds every account seen during a run
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}

    def get_or_create(self, client: int) -> Account:
        """Get the account for a client, opening it on first reference"""
        account = self._accounts.get(client)
        if account is None:
            account = Account(client=client)
            self._accounts[client] = account
        return account

    def get(self, client: int) -> Optional[Account]:
        """Get account by client id"""
        return self._accounts.get(client)

    def __contains__(self, client: int) -> bool:
        return client in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        for client in sorted(self._accounts):
            yield self._accounts[client]
