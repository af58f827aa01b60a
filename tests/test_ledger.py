"""
Test suite for ledger module

Tests the ledger entry store and the per-entry dispute state machine.
"""

import pytest
from decimal import Decimal

from payment_engine.amount import Amount
from payment_engine.errors import (
    DuplicateTransaction, TransactionNotFound, AlreadyDisputed, NotDisputed
)
from payment_engine.ledger import (
    LedgerEntry, LedgerEntryStore, LedgerEntryState, EntryKind
)


class TestLedgerEntry:
    """Test dispute state transitions of a single entry"""

    def setup_method(self):
        """Set up test fixtures"""
        self.entry = LedgerEntry(
            tx=1, client=7, amount=Amount(Decimal('5.5')), kind=EntryKind.DEPOSIT
        )

    def test_new_entry_is_not_disputed(self):
        assert self.entry.state == LedgerEntryState.NORMAL
        assert not self.entry.disputed

    def test_dispute_and_resolve(self):
        """Normal -> Disputed -> Normal"""
        self.entry.dispute()
        assert self.entry.state == LedgerEntryState.DISPUTED
        assert self.entry.disputed

        self.entry.resolve()
        assert self.entry.state == LedgerEntryState.NORMAL
        assert not self.entry.disputed

    def test_charge_back_is_terminal(self):
        """A charged back entry stays disputed and cannot move again"""
        self.entry.dispute()
        self.entry.charge_back()
        assert self.entry.state == LedgerEntryState.CHARGED_BACK
        assert self.entry.disputed

        with pytest.raises(AlreadyDisputed):
            self.entry.dispute()
        with pytest.raises(NotDisputed):
            self.entry.resolve()
        with pytest.raises(NotDisputed):
            self.entry.charge_back()

    def test_double_dispute_rejected(self):
        self.entry.dispute()
        with pytest.raises(AlreadyDisputed) as exc_info:
            self.entry.dispute()
        assert exc_info.value.client == 7
        assert exc_info.value.tx == 1

    def test_resolve_or_charge_back_requires_dispute(self):
        with pytest.raises(NotDisputed):
            self.entry.resolve()
        with pytest.raises(NotDisputed):
            self.entry.charge_back()
        assert self.entry.state == LedgerEntryState.NORMAL

    def test_check_transition_does_not_mutate(self):
        """Checking a transition raises the same error as applying it, and changes nothing"""
        self.entry.check_transition("dispute")
        assert self.entry.state == LedgerEntryState.NORMAL

        with pytest.raises(NotDisputed):
            self.entry.check_transition("resolve")
        with pytest.raises(NotDisputed):
            self.entry.check_transition("charge_back")

        self.entry.dispute()
        with pytest.raises(AlreadyDisputed):
            self.entry.check_transition("dispute")
        self.entry.check_transition("resolve")
        self.entry.check_transition("charge_back")
        assert self.entry.state == LedgerEntryState.DISPUTED


class TestLedgerEntryStore:
    """Test the keyed entry store"""

    def setup_method(self):
        """Set up test fixtures"""
        self.store = LedgerEntryStore()

    def test_insert_and_get(self):
        """Inserted entries can be fetched and mutated in place"""
        entry = self.store.insert(1, 2, Amount(Decimal('10')), EntryKind.DEPOSIT)

        assert entry.tx == 1
        assert entry.client == 2
        assert entry.amount == Amount(Decimal('10'))
        assert entry.kind == EntryKind.DEPOSIT
        assert not entry.disputed

        fetched = self.store.get(1)
        assert fetched is entry

        fetched.dispute()
        assert self.store.get(1).disputed

        assert 1 in self.store
        assert 2 not in self.store
        assert len(self.store) == 1

    def test_duplicate_insert_rejected(self):
        """A transaction id can only be used once, whatever its kind"""
        self.store.insert(1, 2, Amount(Decimal('10')), EntryKind.DEPOSIT)

        with pytest.raises(DuplicateTransaction):
            self.store.insert(1, 2, Amount(Decimal('3')), EntryKind.WITHDRAWAL)
        with pytest.raises(DuplicateTransaction):
            self.store.insert(1, 9, Amount(Decimal('3')), EntryKind.DEPOSIT)

        # Original entry untouched
        entry = self.store.get(1)
        assert entry.amount == Amount(Decimal('10'))
        assert entry.kind == EntryKind.DEPOSIT
        assert len(self.store) == 1

    def test_get_missing_raises(self):
        with pytest.raises(TransactionNotFound) as exc_info:
            self.store.get(42)
        assert exc_info.value.tx == 42

    def test_iteration(self):
        self.store.insert(3, 1, Amount(Decimal('1')), EntryKind.DEPOSIT)
        self.store.insert(4, 1, Amount(Decimal('0.5')), EntryKind.WITHDRAWAL)

        assert sorted(entry.tx for entry in self.store) == [3, 4]
