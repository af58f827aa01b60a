"""
Ledger Entry Store

Durable record of every accepted deposit and withdrawal, keyed by
transaction id. Entries are never removed; only their dispute state changes.
"""

from dataclasses import dataclass
from typing import Dict, Iterator
from enum import Enum

from .amount import Amount
from .errors import (
    DuplicateTransaction, TransactionNotFound, AlreadyDisputed, NotDisputed
)


class EntryKind(Enum):
    """Record types that create ledger entries"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class LedgerEntryState(Enum):
    """States of a ledger entry"""
    NORMAL = "normal"              # Accepted, not under dispute
    DISPUTED = "disputed"          # Amount frozen pending resolution
    CHARGED_BACK = "charged_back"  # Dispute finalized as a loss, terminal


# Transition name -> (required state, next state, error raised otherwise)
_TRANSITIONS = {
    "dispute": (LedgerEntryState.NORMAL, LedgerEntryState.DISPUTED, AlreadyDisputed),
    "resolve": (LedgerEntryState.DISPUTED, LedgerEntryState.NORMAL, NotDisputed),
    "charge_back": (LedgerEntryState.DISPUTED, LedgerEntryState.CHARGED_BACK, NotDisputed),
}


@dataclass
class LedgerEntry:
    """
    A deposit or withdrawal accepted by the engine
    The amount is fixed at insertion; disputes always reuse it
    """
    tx: int
    client: int
    amount: Amount
    kind: EntryKind
    state: LedgerEntryState = LedgerEntryState.NORMAL

    @property
    def disputed(self) -> bool:
        """A charged back entry stays disputed"""
        return self.state != LedgerEntryState.NORMAL

    def check_transition(self, transition: str) -> None:
        """
        Raise the error for a transition the current state does not allow,
        without changing anything

        Args:
            transition: "dispute", "resolve" or "charge_back"

        Raises:
            AlreadyDisputed: Dispute of an entry that is not NORMAL
            NotDisputed: Resolve or charge back of an entry that is not DISPUTED
        """
        required, _, error = _TRANSITIONS[transition]
        if self.state != required:
            raise error(self.client, self.tx)

    def _apply(self, transition: str) -> None:
        self.check_transition(transition)
        self.state = _TRANSITIONS[transition][1]

    def dispute(self) -> None:
        self._apply("dispute")

    def resolve(self) -> None:
        self._apply("resolve")

    def charge_back(self) -> None:
        self._apply("charge_back")


class LedgerEntryStore:
    """
    Keyed mapping from transaction id to LedgerEntry
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def insert(self, tx: int, client: int, amount: Amount, kind: EntryKind) -> LedgerEntry:
        """
        Record a new deposit or withdrawal

        Raises:
            DuplicateTransaction: If the transaction id was already used
        """
        if tx in self._entries:
            raise DuplicateTransaction(client, tx)

        entry = LedgerEntry(tx=tx, client=client, amount=amount, kind=kind)
        self._entries[tx] = entry
        return entry

    def get(self, tx: int) -> LedgerEntry:
        """
        Get the stored entry for a transaction id (mutable)

        Raises:
            TransactionNotFound: If no entry exists for the id
        """
        entry = self._entries.get(tx)
        if entry is None:
            raise TransactionNotFound(tx=tx)
        return entry

    def __contains__(self, tx: int) -> bool:
        return tx in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self._entries.values())
