"""
Transaction Record Module

Decoded, immutable instructions addressed to a client account. Each
transaction type is its own variant so that only funds transactions
(deposits and withdrawals) carry an amount; dispute, resolve and chargeback
only reference an earlier transaction id.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum

from .currency import Money

# Identifier domains: client ids are u16, transaction ids are u32
CLIENT_ID_MAX = 2 ** 16 - 1
TRANSACTION_ID_MAX = 2 ** 32 - 1


class TransactionType(Enum):
    """Types of transaction records"""
    DEPOSIT = "deposit"          # Credit to the account
    WITHDRAWAL = "withdrawal"    # Debit from the account
    DISPUTE = "dispute"          # Claim against an earlier deposit/withdrawal
    RESOLVE = "resolve"          # Dispute settled in the client's favour
    CHARGEBACK = "chargeback"    # Dispute settled against the client
    
    @classmethod
    def parse(cls, value: str) -> 'TransactionType':
        """Case-insensitive lookup by name, e.g. ' Deposit ' -> DEPOSIT"""
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            raise ValueError(f"Unknown transaction type: {value!r}") from None
    
    @property
    def is_funds_movement(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


@dataclass(frozen=True)
class Transaction:
    """Common fields of every transaction record"""
    client_id: int
    transaction_id: int
    
    @property
    def transaction_type(self) -> TransactionType:
        return _TYPE_BY_CLASS[type(self)]


@dataclass(frozen=True)
class FundsTransaction(Transaction):
    """
    A transaction that moves money and is kept in the account ledger.
    A missing amount is carried through so the account can reject it.
    """
    amount: Optional[Money]


@dataclass(frozen=True)
class Deposit(FundsTransaction):
    pass


@dataclass(frozen=True)
class Withdrawal(FundsTransaction):
    pass


@dataclass(frozen=True)
class Dispute(Transaction):
    pass


@dataclass(frozen=True)
class Resolve(Transaction):
    pass


@dataclass(frozen=True)
class Chargeback(Transaction):
    pass


_TYPE_BY_CLASS = {
    Deposit: TransactionType.DEPOSIT,
    Withdrawal: TransactionType.WITHDRAWAL,
    Dispute: TransactionType.DISPUTE,
    Resolve: TransactionType.RESOLVE,
    Chargeback: TransactionType.CHARGEBACK,
}

_CLASS_BY_TYPE = {tx_type: cls for cls, tx_type in _TYPE_BY_CLASS.items()}


def create_transaction(
    transaction_type: TransactionType,
    client_id: int,
    transaction_id: int,
    amount: Optional[Money] = None
) -> Transaction:
    """
    Build the record variant for a transaction type
    
    Args:
        transaction_type: Kind of record to build
        client_id: Client the record is addressed to
        transaction_id: Id of this record, or of the disputed record for
            dispute/resolve/chargeback
        amount: Amount of a deposit or withdrawal, ignored otherwise
        
    Returns:
        Immutable transaction record
    """
    cls = _CLASS_BY_TYPE[transaction_type]
    if transaction_type.is_funds_movement:
        return cls(client_id=client_id, transaction_id=transaction_id, amount=amount)
    return cls(client_id=client_id, transaction_id=transaction_id)
