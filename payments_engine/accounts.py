"""
Account Module

Per-client account state machine. Holds the available/held/total balances,
a ledger of the client's own deposits and withdrawals, and the set of
transaction ids currently under dispute.

Lifecycle of a transaction id inside one account:
    unseen -> recorded (deposit/withdrawal)
    recorded -> disputed (dispute)
    disputed -> recorded (resolve, may be disputed again)
    disputed -> charged back (chargeback, terminal, locks the account)

NOTE: disputing a withdrawal only adds to held, and charging it back only
moves held to available. `total` is left alone in both steps, so
total == available + held does not hold after a withdrawal dispute. This
matches the reference behaviour and is kept on purpose.
"""

from typing import Dict, FrozenSet, Optional, Set, Any

from .currency import Money
from .exceptions import (
    AccountLocked, AlreadyInDispute, InsufficientFunds, InvalidTransaction,
    NotForThisAccount, NotInDispute, TransactionDoesNotExist
)
from .transactions import (
    Transaction, FundsTransaction, Deposit, Withdrawal,
    Dispute, Resolve, Chargeback
)


class Account:
    """
    Bank account for a single client
    
    `process_transaction` is the only mutating entry point. A call either
    applies completely or raises a TransactionError before touching state.
    """
    
    def __init__(
        self,
        client_id: int,
        available: Money,
        held: Money,
        total: Money,
        locked: bool,
        transactions: Dict[int, FundsTransaction],
        in_dispute: Set[int]
    ):
        self.client_id = client_id
        self._available = available
        self._held = held
        self._total = total
        self._locked = locked
        self._transactions = transactions
        self._in_dispute = in_dispute
    
    @classmethod
    def new(cls, client_id: int) -> 'Account':
        """Create an unlocked account with zero balances and an empty ledger"""
        return cls(
            client_id=client_id,
            available=Money.zero(),
            held=Money.zero(),
            total=Money.zero(),
            locked=False,
            transactions={},
            in_dispute=set()
        )
    
    @property
    def available(self) -> Money:
        return self._available
    
    @property
    def held(self) -> Money:
        return self._held
    
    @property
    def total(self) -> Money:
        return self._total
    
    @property
    def locked(self) -> bool:
        return self._locked
    
    @property
    def disputed_transaction_ids(self) -> FrozenSet[int]:
        return frozenset(self._in_dispute)
    
    def get_transaction(self, transaction_id: int) -> Optional[FundsTransaction]:
        """Get a recorded deposit or withdrawal by id"""
        return self._transactions.get(transaction_id)
    
    def is_disputed(self, transaction_id: int) -> bool:
        return transaction_id in self._in_dispute
    
    def process_transaction(self, transaction: Transaction) -> None:
        """
        Apply a transaction record to this account
        
        Args:
            transaction: Record addressed to this account's client
            
        Raises:
            NotForThisAccount: If the record belongs to another client
            AccountLocked: If a chargeback has already locked the account
            TransactionError: Subclass describing why the record was rejected
        """
        if transaction.client_id != self.client_id:
            raise self._error(NotForThisAccount, transaction.transaction_id)
        
        if self._locked:
            raise self._error(AccountLocked, transaction.transaction_id)
        
        if isinstance(transaction, FundsTransaction):
            if transaction.amount is None:
                raise self._error(InvalidTransaction, transaction.transaction_id)
            if isinstance(transaction, Deposit):
                self._deposit(transaction.amount)
            elif isinstance(transaction, Withdrawal):
                self._withdraw(transaction.amount, transaction.transaction_id)
            else:
                raise self._error(InvalidTransaction, transaction.transaction_id)
            # Duplicate ids overwrite the earlier record
            self._transactions[transaction.transaction_id] = transaction
        elif isinstance(transaction, Dispute):
            self._dispute(transaction.transaction_id)
        elif isinstance(transaction, Resolve):
            self._resolve(transaction.transaction_id)
        elif isinstance(transaction, Chargeback):
            self._chargeback(transaction.transaction_id)
        else:
            raise self._error(InvalidTransaction, transaction.transaction_id)
    
    def _deposit(self, amount: Money) -> None:
        self._available = self._available + amount
        self._total = self._total + amount
    
    def _withdraw(self, amount: Money, transaction_id: int) -> None:
        if self._available < amount:
            raise self._error(InsufficientFunds, transaction_id)
        self._available = self._available - amount
        self._total = self._total - amount
    
    def _dispute(self, transaction_id: int) -> None:
        """Move a deposit's funds to held, or hold a withdrawal's amount"""
        if transaction_id in self._in_dispute:
            raise self._error(AlreadyInDispute, transaction_id)
        disputed = self._lookup(transaction_id)
        
        if isinstance(disputed, Deposit):
            self._available = self._available - disputed.amount
            self._held = self._held + disputed.amount
        elif isinstance(disputed, Withdrawal):
            self._held = self._held + disputed.amount
        else:
            raise self._error(InvalidTransaction, transaction_id)
        
        self._in_dispute.add(transaction_id)
    
    def _resolve(self, transaction_id: int) -> None:
        """Undo the fund placement made by the matching dispute"""
        if transaction_id not in self._in_dispute:
            raise self._error(NotInDispute, transaction_id)
        disputed = self._lookup(transaction_id)
        
        if isinstance(disputed, Deposit):
            self._available = self._available + disputed.amount
            self._held = self._held - disputed.amount
        elif isinstance(disputed, Withdrawal):
            self._held = self._held - disputed.amount
        else:
            raise self._error(InvalidTransaction, transaction_id)
        
        self._in_dispute.discard(transaction_id)
    
    def _chargeback(self, transaction_id: int) -> None:
        """Reverse a disputed transaction and lock the account for good"""
        if transaction_id not in self._in_dispute:
            raise self._error(NotInDispute, transaction_id)
        disputed = self._lookup(transaction_id)
        
        if isinstance(disputed, Deposit):
            self._held = self._held - disputed.amount
            self._total = self._total - disputed.amount
        elif isinstance(disputed, Withdrawal):
            self._available = self._available + disputed.amount
            self._held = self._held - disputed.amount
        else:
            raise self._error(InvalidTransaction, transaction_id)
        
        self._locked = True
        self._in_dispute.discard(transaction_id)
    
    def _lookup(self, transaction_id: int) -> FundsTransaction:
        disputed = self._transactions.get(transaction_id)
        if disputed is None:
            raise self._error(TransactionDoesNotExist, transaction_id)
        return disputed
    
    def _error(self, error_class, transaction_id: int):
        return error_class(client_id=self.client_id, transaction_id=transaction_id)
    
    def to_dict(self) -> Dict[str, Any]:
        """Snapshot row for output"""
        return {
            "client": self.client_id,
            "available": self._available,
            "held": self._held,
            "total": self._total,
            "locked": self._locked,
        }
    
    def __repr__(self) -> str:
        return (
            f"Account(client={self.client_id}, available={self._available}, "
            f"held={self._held}, total={self._total}, locked={self._locked})"
        )
