"""
Ledger State Module

Owns every client account and applies transaction records to them one at a
time, in arrival order. The run loop is the only mutator of account state,
so accounts need no locking of their own.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .accounts import Account
from .exceptions import TransactionError
from .feed import TransactionFeed
from .logging_config import get_logger, log_action
from .transactions import Transaction


@dataclass
class ProcessingStats:
    """Counters for one run of the ledger"""
    processed: int = 0
    failed: int = 0
    failures_by_code: Dict[str, int] = field(default_factory=dict)
    
    def record_success(self) -> None:
        self.processed += 1
    
    def record_failure(self, error: TransactionError) -> None:
        self.failed += 1
        self.failures_by_code[error.code] = self.failures_by_code.get(error.code, 0) + 1
    
    @property
    def total(self) -> int:
        return self.processed + self.failed
    
    def to_dict(self) -> Dict[str, object]:
        return {
            "processed": self.processed,
            "failed": self.failed,
            "failures_by_code": dict(self.failures_by_code),
        }


class LedgerState:
    """
    Maps client ids to accounts and drains a transaction feed into them
    """
    
    def __init__(self, feed: Optional[TransactionFeed] = None):
        self._accounts: Dict[int, Account] = {}
        self.feed = feed
        self.stats = ProcessingStats()
        self.logger = get_logger("payments_engine.state")
    
    def get_or_create_account(self, client_id: int) -> Account:
        """Get the client's account, opening an empty one on first use"""
        account = self._accounts.get(client_id)
        if account is None:
            account = Account.new(client_id)
            self._accounts[client_id] = account
            self.logger.debug(f"Opened account for client {client_id}")
        return account
    
    def get_all_accounts(self) -> Mapping[int, Account]:
        """Read-only view of all accounts known to the ledger"""
        return MappingProxyType(self._accounts)
    
    def process_transaction(self, transaction: Transaction) -> None:
        """Route a record to its account. TransactionError propagates."""
        account = self.get_or_create_account(transaction.client_id)
        account.process_transaction(transaction)
    
    def process_one(self, transaction: Transaction) -> bool:
        """
        Apply a record, reporting rather than raising per-transaction errors
        
        Returns:
            True if the record was applied, False if it was rejected
        """
        try:
            self.process_transaction(transaction)
        except TransactionError as e:
            self.stats.record_failure(e)
            log_action(
                self.logger, "warning",
                f"Error processing transaction: {e}",
                action=transaction.transaction_type.value,
                resource="transaction",
                client_id=transaction.client_id,
                transaction_id=transaction.transaction_id,
                extra={"error": e.code}
            )
            return False
        
        self.stats.record_success()
        return True
    
    async def run(self) -> Mapping[int, Account]:
        """
        Drain the feed until it is closed and empty
        
        Returns:
            Final account mapping
            
        Raises:
            RuntimeError: If the ledger was created without a feed
        """
        if self.feed is None:
            raise RuntimeError("LedgerState.run() requires a transaction feed")
        
        async for transaction in self.feed:
            self.process_one(transaction)
        
        self.logger.info(
            f"Processed {self.stats.total} transactions "
            f"({self.stats.failed} rejected) across {len(self._accounts)} accounts"
        )
        return self.get_all_accounts()
