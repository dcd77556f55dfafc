"""
Error Taxonomy Module

Every per-transaction failure is a TransactionError subclass. They are
recoverable and scoped to a single record: the ledger reports them and
moves on. InputSourceError is the only fatal condition and lives at the
boundary, before any record is processed.
"""

from typing import Optional


class TransactionError(Exception):
    """Base class for errors raised while applying a single transaction"""
    
    code = "transaction_error"
    message = "Transaction failed"
    
    def __init__(
        self,
        message: Optional[str] = None,
        client_id: Optional[int] = None,
        transaction_id: Optional[int] = None
    ):
        super().__init__(message or self.message)
        self.client_id = client_id
        self.transaction_id = transaction_id


class InsufficientFunds(TransactionError):
    code = "insufficient_funds"
    message = "Insufficient funds for transaction"


class AccountLocked(TransactionError):
    code = "account_locked"
    message = "Account is locked"


class InvalidTransaction(TransactionError):
    code = "invalid_transaction"
    message = "Invalid transaction"


class AlreadyInDispute(TransactionError):
    code = "already_in_dispute"
    message = "Transaction is already in dispute"


class NotInDispute(TransactionError):
    code = "not_in_dispute"
    message = "Transaction not in dispute"


class NotForThisAccount(TransactionError):
    code = "not_for_this_account"
    message = "Transaction is not for this account"


class TransactionDoesNotExist(TransactionError):
    code = "transaction_does_not_exist"
    message = "Transaction does not exist"


class InputSourceError(Exception):
    """Raised when the input source cannot be opened or read"""


class FeedClosed(RuntimeError):
    """Raised when a record is pushed into a feed that has been closed"""
