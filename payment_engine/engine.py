"""
Transaction Processing Module

Applies deposits, withdrawals, disputes, resolutions and chargebacks to client
accounts. Every record goes through a single transition function whose first
check is the account lock, so a locked account can never be mutated.
"""

from typing import Callable, Dict, Type
import threading

from .accounts import Account, AccountRegistry
from .errors import (
    DuplicateTransaction, InsufficientFunds, LockedAccount, TransactionError,
    TransactionNotFound
)
from .ledger import EntryKind, LedgerEntry, LedgerEntryStore
from .logging_config import get_logger, log_action
from .records import (
    BaseRecord, ChargebackRecord, DepositRecord, DisputeRecord, IncomingRecord,
    ResolveRecord, WithdrawalRecord
)


class PaymentEngine:
    """
    Owns the account registry and ledger entry store for one batch run
    and applies records to them strictly in the order they are given
    """

    def __init__(self):
        self.accounts = AccountRegistry()
        self.ledger = LedgerEntryStore()
        self.logger = get_logger("payment_engine.engine")
        self._lock = threading.RLock()

        self._handlers: Dict[Type[BaseRecord], Callable[[Account, BaseRecord], None]] = {
            DepositRecord: self._deposit,
            WithdrawalRecord: self._withdraw,
            DisputeRecord: self._dispute,
            ResolveRecord: self._resolve,
            ChargebackRecord: self._chargeback,
        }

    def process(self, record: IncomingRecord) -> None:
        """
        Apply one record

        The account for the record's client is opened if this is the first
        time the client is seen, even when the record is then rejected.

        Args:
            record: A validated incoming record

        Raises:
            LockedAccount: The account was locked by an earlier chargeback
            DuplicateTransaction: A deposit/withdrawal reused a transaction id
            InsufficientFunds: Available funds do not cover the amount
            TransactionNotFound: Unknown transaction id, or owned by another client
            AlreadyDisputed: Dispute of a transaction already under dispute
            NotDisputed: Resolve or chargeback of an undisputed transaction
        """
        handler = self._handlers.get(type(record))
        if handler is None:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")

        with self._lock:
            account = self.accounts.get_or_create(record.client)
            try:
                if account.locked:
                    raise LockedAccount(record.client, record.tx)
                handler(account, record)
            except TransactionError as e:
                log_action(
                    self.logger, "debug", f"Record rejected: {e}",
                    action=record.type, resource=f"tx:{record.tx}",
                    extra={"client": record.client, "error": type(e).__name__}
                )
                raise

    def _deposit(self, account: Account, record: DepositRecord) -> None:
        if record.tx in self.ledger:
            raise DuplicateTransaction(record.client, record.tx)

        available = account.available + record.amount
        self.ledger.insert(record.tx, record.client, record.amount, EntryKind.DEPOSIT)
        account.available = available

    def _withdraw(self, account: Account, record: WithdrawalRecord) -> None:
        if record.tx in self.ledger:
            raise DuplicateTransaction(record.client, record.tx)

        if account.available < record.amount:
            raise InsufficientFunds(record.client, record.tx)

        available = account.available - record.amount
        self.ledger.insert(record.tx, record.client, record.amount, EntryKind.WITHDRAWAL)
        account.available = available

    def _dispute(self, account: Account, record: DisputeRecord) -> None:
        entry = self._owned_entry(record)
        entry.check_transition("dispute")

        # Balances never go negative: the disputed funds must still be available
        if account.available < entry.amount:
            raise InsufficientFunds(record.client, record.tx)

        available, held = account.available - entry.amount, account.held + entry.amount
        entry.dispute()
        account.available, account.held = available, held

    def _resolve(self, account: Account, record: ResolveRecord) -> None:
        entry = self._owned_entry(record)
        entry.check_transition("resolve")

        available, held = account.available + entry.amount, account.held - entry.amount
        entry.resolve()
        account.available, account.held = available, held

    def _chargeback(self, account: Account, record: ChargebackRecord) -> None:
        entry = self._owned_entry(record)
        entry.check_transition("charge_back")

        # Total is available + held, so it drops with held
        held = account.held - entry.amount
        entry.charge_back()
        account.held = held
        account.locked = True

    def _owned_entry(self, record: BaseRecord) -> LedgerEntry:
        """
        Look up the entry a dispute-style record refers to

        An entry owned by another client is reported exactly like a missing
        one, so transaction ids of other clients stay hidden.
        """
        try:
            entry = self.ledger.get(record.tx)
        except TransactionNotFound:
            raise TransactionNotFound(record.client, record.tx) from None

        if entry.client != record.client:
            raise TransactionNotFound(record.client, record.tx)

        return entry
