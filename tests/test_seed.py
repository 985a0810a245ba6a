"""
Tests for sample data seeding
"""

import pytest
from decimal import Decimal

from bank_dashboard.accounts import AccountStore
from bank_dashboard.async_storage import AsyncInMemoryStorage
from bank_dashboard.seed import SAMPLE_ACCOUNTS, SAMPLE_TRANSACTIONS, seed_sample_data
from bank_dashboard.transactions import TransactionStore


class TestSeedSampleData:
    
    @pytest.mark.asyncio
    async def test_seed_loads_accounts_and_history(self):
        storage = AsyncInMemoryStorage()
        accounts = AccountStore(storage)
        transactions = TransactionStore(storage)
        
        added = await seed_sample_data(accounts, transactions)
        
        assert added == len(SAMPLE_ACCOUNTS)
        assert (await accounts.get_by_id("1")).balance == Decimal("5250.75")
        assert (await accounts.get_by_id("2")).account_holder == "Jane Smith"
        total = sum([await transactions.count_matching(a[0]) for a in SAMPLE_ACCOUNTS])
        assert total == len(SAMPLE_TRANSACTIONS)
    
    @pytest.mark.asyncio
    async def test_seed_twice_does_not_duplicate(self):
        storage = AsyncInMemoryStorage()
        accounts = AccountStore(storage)
        transactions = TransactionStore(storage)
        
        await seed_sample_data(accounts, transactions)
        added = await seed_sample_data(accounts, transactions)
        
        assert added == 0
        assert await transactions.count_matching("1") == 5
        assert len(await accounts.get_all()) == 3
