"""
Command Line Entry Point

Usage: payments-engine <input_csv_file>

Reads transactions from the CSV file, applies them to client accounts and
writes the final account snapshot to stdout as CSV. Diagnostics go to
stderr.
"""

import asyncio
import os
import sys
from typing import List, Mapping, Optional

from .accounts import Account
from .config import get_config
from .csv_io import produce, read_transactions, write_accounts
from .exceptions import InputSourceError
from .feed import TransactionFeed
from .logging_config import get_logger, setup_logging
from .state import LedgerState

logger = get_logger("payments_engine.cli")


async def run_engine(path: str, feed_capacity: int = 100) -> Mapping[int, Account]:
    """
    Stream a CSV file through the ledger
    
    The reader pushes records into a bounded feed while the ledger drains
    it concurrently, so the reader waits whenever the ledger falls behind.
    If either side fails, the other is cancelled and the error propagates.
    
    Raises:
        InputSourceError: If the input cannot be opened; nothing is processed
    """
    records = read_transactions(path)
    
    feed = TransactionFeed(feed_capacity)
    ledger = LedgerState(feed)
    producer = asyncio.create_task(produce(records, feed))
    consumer = asyncio.create_task(ledger.run())
    
    try:
        _, accounts = await asyncio.gather(producer, consumer)
    except BaseException:
        for task in (producer, consumer):
            task.cancel()
        await asyncio.gather(producer, consumer, return_exceptions=True)
        raise
    
    return accounts


def main(argv: Optional[List[str]] = None) -> int:
    """Run the engine, returning the process exit status"""
    argv = sys.argv if argv is None else argv
    prog = os.path.basename(argv[0]) if argv else "payments-engine"
    
    if len(argv) != 2:
        print(f"Usage: {prog} <input_csv_file>", file=sys.stderr)
        return 1
    
    config = get_config()
    setup_logging(
        level=config.log_level,
        fmt=config.log_format,
        log_file=config.log_file
    )
    
    try:
        accounts = asyncio.run(run_engine(argv[1], config.feed_capacity))
    except InputSourceError as e:
        logger.error(str(e))
        return 1
    
    write_accounts(accounts.values(), sys.stdout)
    return 0
