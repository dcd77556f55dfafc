"""
Test suite for the transaction feed

Tests FIFO ordering, backpressure, closing and draining.
"""

import asyncio

import pytest

from payments_engine.exceptions import FeedClosed
from payments_engine.feed import TransactionFeed

from builders import deposit, dispute


class TestTransactionFeed:
    """Test TransactionFeed behaviour"""
    
    def test_capacity_must_be_positive(self):
        """Test invalid capacities are rejected"""
        with pytest.raises(ValueError):
            TransactionFeed(0)
        with pytest.raises(ValueError):
            TransactionFeed(-5)
    
    @pytest.mark.asyncio
    async def test_fifo_order(self):
        """Test records come out in the order they went in"""
        feed = TransactionFeed(10)
        records = [deposit(1, i, '1') for i in range(5)]
        for record in records:
            await feed.put(record)
        feed.close()
        
        received = [record async for record in feed]
        assert received == records
    
    @pytest.mark.asyncio
    async def test_get_after_drain_returns_none(self):
        """Test a drained, closed feed keeps reporting exhaustion"""
        feed = TransactionFeed(2)
        await feed.put(dispute(1, 1))
        feed.close()
        
        assert await feed.get() == dispute(1, 1)
        assert await feed.get() is None
        assert await feed.get() is None
    
    @pytest.mark.asyncio
    async def test_put_after_close(self):
        """Test pushing into a closed feed fails"""
        feed = TransactionFeed(2)
        feed.close()
        feed.close()  # idempotent
        
        assert feed.closed
        with pytest.raises(FeedClosed):
            await feed.put(deposit(1, 1, '1'))
    
    @pytest.mark.asyncio
    async def test_backpressure(self):
        """Test the producer waits while the feed is full"""
        feed = TransactionFeed(2)
        await feed.put(deposit(1, 1, '1'))
        await feed.put(deposit(1, 2, '1'))
        assert feed.qsize() == 2
        
        blocked = asyncio.create_task(feed.put(deposit(1, 3, '1')))
        await asyncio.sleep(0.01)
        assert not blocked.done()
        
        assert await feed.get() == deposit(1, 1, '1')
        await asyncio.wait_for(blocked, timeout=1)
        assert feed.qsize() == 2
    
    @pytest.mark.asyncio
    async def test_consumer_waits_for_records(self):
        """Test the consumer waits on an empty open feed"""
        feed = TransactionFeed(2)
        waiting = asyncio.create_task(feed.get())
        await asyncio.sleep(0.01)
        assert not waiting.done()
        
        await feed.put(deposit(1, 1, '1'))
        assert await asyncio.wait_for(waiting, timeout=1) == deposit(1, 1, '1')
    
    @pytest.mark.asyncio
    async def test_close_wakes_waiting_consumer(self):
        """Test closing an empty feed ends a waiting consumer"""
        feed = TransactionFeed(2)
        waiting = asyncio.create_task(feed.get())
        await asyncio.sleep(0.01)
        
        feed.close()
        assert await asyncio.wait_for(waiting, timeout=1) is None
    
    @pytest.mark.asyncio
    async def test_close_on_full_feed_drains_buffer(self):
        """Test closing a full feed keeps buffered records"""
        feed = TransactionFeed(1)
        await feed.put(deposit(1, 1, '1'))
        feed.close()
        
        assert feed.qsize() == 1
        assert [record async for record in feed] == [deposit(1, 1, '1')]
        assert feed.qsize() == 0
    
    @pytest.mark.asyncio
    async def test_concurrent_producer_and_consumer(self):
        """Test a small feed carries many records in order"""
        feed = TransactionFeed(3)
        records = [deposit(1, i, '0.0001') for i in range(100)]
        
        async def producer():
            for record in records:
                await feed.put(record)
            feed.close()
        
        async def consumer():
            return [record async for record in feed]
        
        _, received = await asyncio.gather(producer(), consumer())
        assert received == records
