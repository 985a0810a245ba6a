"""
Test suite for the transaction store

Covers id assignment, filtered counts, pagination windows, newest-first
ordering and per-type summaries.
"""

import pytest
import pytest_asyncio
from decimal import Decimal
from datetime import datetime, timedelta, timezone

from bank_dashboard.async_storage import AsyncInMemoryStorage
from bank_dashboard.errors import InternalError
from bank_dashboard.transactions import (
    Transaction, TransactionFilters, TransactionStore, TransactionSummary, TransactionType
)


NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def storage():
    return AsyncInMemoryStorage()


@pytest_asyncio.fixture
async def store(storage):
    return TransactionStore(storage)


@pytest_asyncio.fixture
async def history(store):
    """Five transactions on account 1 and one on account 2"""
    rows = [
        ("1", TransactionType.DEPOSIT, "1500", "Salary deposit", 25),
        ("1", TransactionType.WITHDRAWAL, "200", "ATM withdrawal", 20),
        ("1", TransactionType.TRANSFER, "350", "Rent payment", 15),
        ("1", TransactionType.DEPOSIT, "500", "Freelance payment", 10),
        ("1", TransactionType.WITHDRAWAL, "75.50", "Grocery shopping", 5),
        ("2", TransactionType.DEPOSIT, "5000", "Initial deposit", 55),
    ]
    for account_id, txn_type, amount, description, days_ago in rows:
        await store.insert(account_id, txn_type, Decimal(amount), description,
                           NOW - timedelta(days=days_ago))
    return store


class TestInsert:
    """Test recording transactions"""
    
    @pytest.mark.asyncio
    async def test_ids_increase(self, store):
        """Each insert gets the next integer id"""
        first = await store.insert("1", TransactionType.DEPOSIT, Decimal("10"), "a", NOW)
        second = await store.insert("1", TransactionType.DEPOSIT, Decimal("20"), "b", NOW)
        
        assert isinstance(first, Transaction)
        assert first.id == 1
        assert second.id == 2
    
    @pytest.mark.asyncio
    async def test_missing_description_stored_empty(self, store):
        """No description is stored as an empty string"""
        await store.insert("1", TransactionType.DEPOSIT, Decimal("10"), None, NOW)
        
        [stored] = await store.query_page("1", None, 1, 10)
        
        assert stored.description == ""
        assert stored.amount == Decimal("10")
        assert stored.created_at == NOW
    
    @pytest.mark.asyncio
    async def test_storage_failure(self, storage, store):
        """Storage failures become InternalError"""
        await storage.close()
        with pytest.raises(InternalError) as exc_info:
            await store.insert("1", TransactionType.DEPOSIT, Decimal("10"), None, NOW)
        assert exc_info.value.message == "Failed to create transaction"


class TestQueries:
    """Test counts, pages and filters"""
    
    @pytest.mark.asyncio
    async def test_page_is_newest_first(self, history):
        page = await history.query_page("1", None, 1, 10)
        
        assert [t.description for t in page] == [
            "Grocery shopping", "Freelance payment", "Rent payment",
            "ATM withdrawal", "Salary deposit"
        ]
    
    @pytest.mark.asyncio
    async def test_only_own_account(self, history):
        assert await history.count_matching("1") == 5
        assert await history.count_matching("2") == 1
        assert await history.count_matching("3") == 0
    
    @pytest.mark.asyncio
    async def test_pagination_window(self, history):
        """Pages never exceed the limit and start at (page-1)*limit"""
        first = await history.query_page("1", None, 1, 2)
        second = await history.query_page("1", None, 2, 2)
        third = await history.query_page("1", None, 3, 2)
        beyond = await history.query_page("1", None, 4, 2)
        
        assert len(first) == 2
        assert len(second) == 2
        assert len(third) == 1
        assert beyond == []
        ids = [t.id for t in first + second + third]
        assert len(set(ids)) == 5
    
    @pytest.mark.asyncio
    async def test_same_timestamp_ordered_by_id(self, store):
        """Ties on creation time list the later insert first"""
        await store.insert("1", TransactionType.DEPOSIT, Decimal("1"), "first", NOW)
        await store.insert("1", TransactionType.DEPOSIT, Decimal("2"), "second", NOW)
        
        page = await store.query_page("1", None, 1, 10)
        
        assert [t.description for t in page] == ["second", "first"]
    
    @pytest.mark.asyncio
    async def test_type_filter(self, history):
        filters = TransactionFilters(transaction_type=TransactionType.WITHDRAWAL)
        
        assert await history.count_matching("1", filters) == 2
        page = await history.query_page("1", filters, 1, 10)
        assert {t.transaction_type for t in page} == {TransactionType.WITHDRAWAL}
    
    @pytest.mark.asyncio
    async def test_date_bounds_inclusive(self, history):
        """Both date bounds include transactions exactly on the bound"""
        filters = TransactionFilters(
            start_date=NOW - timedelta(days=20),
            end_date=NOW - timedelta(days=10)
        )
        page = await history.query_page("1", filters, 1, 10)
        
        assert [t.description for t in page] == [
            "Freelance payment", "Rent payment", "ATM withdrawal"
        ]
    
    @pytest.mark.asyncio
    async def test_amount_bounds_inclusive(self, history):
        filters = TransactionFilters(min_amount=Decimal("200"), max_amount=Decimal("500"))
        
        page = await history.query_page("1", filters, 1, 10)
        
        assert sorted(t.amount for t in page) == [Decimal("200"), Decimal("350"), Decimal("500")]
    
    @pytest.mark.asyncio
    async def test_filters_are_conjunctive(self, history):
        """A transaction matches only if it satisfies every filter"""
        filters = TransactionFilters(
            transaction_type=TransactionType.DEPOSIT,
            min_amount=Decimal("600")
        )
        page = await history.query_page("1", filters, 1, 10)
        
        assert [t.description for t in page] == ["Salary deposit"]
        assert await history.count_matching("1", filters) == 1
    
    @pytest.mark.asyncio
    async def test_repeated_queries_identical(self, history):
        """Reads without intervening writes return the same result"""
        filters = TransactionFilters(max_amount=Decimal("1000"))
        
        first = await history.query_page("1", filters, 1, 3)
        second = await history.query_page("1", filters, 1, 3)
        
        assert first == second


class TestSummary:
    """Test per-type totals"""
    
    @pytest.mark.asyncio
    async def test_summarize(self, history):
        summary = await history.summarize("1")
        
        assert summary == TransactionSummary(
            total_deposits=Decimal("2000"),
            total_withdrawals=Decimal("275.50"),
            total_transfers=Decimal("350"),
            transaction_count=5
        )
    
    @pytest.mark.asyncio
    async def test_summarize_empty_account(self, store):
        """Accounts without transactions sum to zero"""
        summary = await store.summarize("nobody")
        
        assert summary.total_deposits == Decimal("0")
        assert summary.total_withdrawals == Decimal("0")
        assert summary.total_transfers == Decimal("0")
        assert summary.transaction_count == 0


class TestTransactionType:
    
    def test_debit_types(self):
        assert TransactionType.WITHDRAWAL.is_debit
        assert TransactionType.TRANSFER.is_debit
        assert not TransactionType.DEPOSIT.is_debit
