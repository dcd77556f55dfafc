"""
CSV Boundary Module

Decodes the CSV input into transaction records and encodes the final
account snapshot. Rows that fail validation are dropped here so the ledger
only ever sees well-formed records. A deposit or withdrawal without an
amount is passed on for the ledger to reject.
"""

import asyncio
import csv
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

from pydantic import BaseModel, Field, ValidationError, field_validator

from .accounts import Account
from .currency import Money
from .exceptions import InputSourceError
from .feed import TransactionFeed
from .logging_config import get_logger
from .transactions import (
    CLIENT_ID_MAX, TRANSACTION_ID_MAX, Transaction, TransactionType, create_transaction
)

INPUT_COLUMNS = ("type", "client", "tx", "amount")
REQUIRED_COLUMNS = ("type", "client", "tx")
OUTPUT_COLUMNS = ("client", "available", "held", "total", "locked")

logger = get_logger("payments_engine.csv_io")

# Returned by next() once the record source is exhausted
_END = object()


class TransactionRow(BaseModel):
    """One decoded input row"""
    type: TransactionType
    client: int = Field(..., ge=0, le=CLIENT_ID_MAX)
    tx: int = Field(..., ge=0, le=TRANSACTION_ID_MAX)
    amount: Optional[Decimal] = None
    
    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return TransactionType.parse(value)
        return value
    
    @field_validator("client", "tx", mode="before")
    @classmethod
    def _strip_id(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value
    
    @field_validator("amount", mode="before")
    @classmethod
    def _blank_amount(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
        return value
    
    def to_transaction(self) -> Transaction:
        amount = Money.from_decimal(self.amount) if self.amount is not None else None
        return create_transaction(self.type, self.client, self.tx, amount)


def parse_row(fields: Dict[str, Optional[str]]) -> Optional[Transaction]:
    """
    Decode one CSV row
    
    Returns:
        Transaction record, or None if the row is malformed
    """
    try:
        return TransactionRow(**fields).to_transaction()
    except (ValidationError, ValueError) as e:
        logger.debug(f"Dropping malformed row {fields!r}: {e}")
        return None


def read_transactions(path: str) -> Iterator[Transaction]:
    """
    Open a CSV input and iterate its well-formed transaction records
    
    The file is opened and its header checked before this returns, so a
    missing or unreadable input fails before any record is produced.
    
    Raises:
        InputSourceError: If the file cannot be opened or has no usable header
    """
    try:
        handle = open(path, newline="", encoding="utf-8-sig")
    except OSError as e:
        raise InputSourceError(f"Failed to read CSV file {path}: {e}") from e

    reader = csv.reader(handle)
    try:
        header = next(reader, None)
    except (csv.Error, UnicodeDecodeError) as e:
        handle.close()
        raise InputSourceError(f"Failed to read CSV file {path}: {e}") from e

    columns: List[str] = []
    if header is not None:
        try:
            columns = _header_columns(header)
        except InputSourceError:
            handle.close()
            raise

    return _iter_records(handle, reader, columns)


def _header_columns(header: List[str]) -> List[str]:
    columns = [name.strip().lower() for name in header]
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise InputSourceError(f"CSV header is missing columns: {', '.join(missing)}")
    return columns


def _iter_records(handle: TextIO, reader, columns: List[str]) -> Iterator[Transaction]:
    with handle:
        if not columns:
            return
        line = 1
        while True:
            line += 1
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                logger.debug(f"Dropping unreadable line {line}: {e}")
                continue
            
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) > len(columns):
                logger.debug(f"Dropping line {line}: too many fields")
                continue
            
            fields = {
                name: value for name, value in zip(columns, row)
                if name in INPUT_COLUMNS
            }
            transaction = parse_row(fields)
            if transaction is not None:
                yield transaction


async def produce(records: Iterable[Transaction], feed: TransactionFeed) -> int:
    """
    Push records into the feed in order, then close it
    
    Each record is pulled from the source in a worker thread so that file
    reads never block the event loop the ledger runs on.
    
    Returns:
        Number of records pushed
    """
    count = 0
    try:
        iterator = iter(records)
        while True:
            transaction = await asyncio.to_thread(next, iterator, _END)
            if transaction is _END:
                break
            await feed.put(transaction)
            count += 1
    finally:
        feed.close()
    return count


def format_row(account: Account) -> List[str]:
    """Output fields for one account"""
    row = account.to_dict()
    return [
        str(row["client"]),
        row["available"].to_string(),
        row["held"].to_string(),
        row["total"].to_string(),
        "true" if row["locked"] else "false",
    ]


def write_accounts(accounts: Iterable[Account], stream: TextIO) -> int:
    """
    Write the account snapshot as CSV
    
    Returns:
        Number of account rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_COLUMNS)
    count = 0
    for account in accounts:
        writer.writerow(format_row(account))
        count += 1
    return count
