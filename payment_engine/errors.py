"""
Transaction errors raised by the payment engine.

Every rejected record raises one of the TransactionError subclasses below.
None of them leave partially applied state behind.
"""

from typing import Optional


class TransactionError(Exception):
    """Base class for a record the engine refused to apply."""

    message = "Transaction rejected"

    def __init__(self, client: Optional[int] = None, tx: Optional[int] = None):
        self.client = client
        self.tx = tx
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.client is None and self.tx is None:
            return self.message
        return f"{self.message} (client={self.client}, tx={self.tx})"


class LockedAccount(TransactionError):
    """Raised for any record targeting an account frozen by a chargeback."""
    message = "Account is locked"


class DuplicateTransaction(TransactionError):
    """Raised when a deposit/withdrawal reuses a transaction id."""
    message = "Cannot overwrite an existing transaction"


class InsufficientFunds(TransactionError):
    """Raised when available funds do not cover the requested amount."""
    message = "Cannot move more money than the account has available"


class TransactionNotFound(TransactionError):
    """Raised when a referenced transaction is unknown or owned by another client."""
    message = "The transaction was not found"


class AlreadyDisputed(TransactionError):
    message = "The transaction is already disputed"


class NotDisputed(TransactionError):
    message = "Cannot resolve or charge back a transaction that is not disputed"


class MalformedRecord(ValueError):
    """Raised by the input layer for a row that is not a well-formed record."""

    def __init__(self, reason: str, line: Optional[int] = None):
        self.reason = reason
        self.line = line
        if line is None:
            super().__init__(reason)
        else:
            super().__init__(f"line {line}: {reason}")
