"""
Transaction Feed Module

Bounded FIFO between the single producer (input decoder) and the single
consumer (ledger run loop). The producer suspends while the feed is full,
the consumer suspends while it is empty, and closing the feed lets the
consumer drain what is buffered and then stop.
"""

import asyncio
from typing import AsyncIterator, Optional

from .exceptions import FeedClosed
from .transactions import Transaction

# Marks the end of the stream inside the queue
_CLOSED = object()


class TransactionFeed:
    """Capacity-limited, ordered, closable feed of transaction records"""
    
    def __init__(self, capacity: int = 100):
        if capacity <= 0:
            raise ValueError("Feed capacity must be positive")
        self.capacity = capacity
        # One extra slot so close() never waits behind a full buffer
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity + 1)
        self._slots = asyncio.Semaphore(capacity)
        self._closed = False
        self._exhausted = False
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    def qsize(self) -> int:
        """Number of records currently buffered"""
        size = self._queue.qsize()
        if self._closed and not self._exhausted:
            size -= 1
        return max(size, 0)
    
    async def put(self, transaction: Transaction) -> None:
        """Push a record, waiting for a free slot when the feed is full"""
        if self._closed:
            raise FeedClosed("Cannot push into a closed feed")
        await self._slots.acquire()
        if self._closed:
            self._slots.release()
            raise FeedClosed("Cannot push into a closed feed")
        self._queue.put_nowait(transaction)
    
    def close(self) -> None:
        """Signal that no more records will be pushed. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)
    
    async def get(self) -> Optional[Transaction]:
        """Next record in arrival order, or None once closed and drained"""
        if self._exhausted:
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            self._exhausted = True
            return None
        self._slots.release()
        return item
    
    def __aiter__(self) -> AsyncIterator[Transaction]:
        return self._iterate()
    
    async def _iterate(self) -> AsyncIterator[Transaction]:
        while True:
            transaction = await self.get()
            if transaction is None:
                return
            yield transaction
