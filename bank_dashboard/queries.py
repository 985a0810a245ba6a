"""
Transaction Query Module

Translates listing parameters into a bounded, newest-first page of
transactions plus pagination metadata, and serves per-account summaries.
"""

from dataclasses import dataclass
from typing import Any, List
import math

from .accounts import AccountStore
from .errors import NotFoundError
from .transactions import Transaction, TransactionStore, TransactionSummary
from .validation import validate_transaction_query


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def compute(cls, page: int, limit: int, total: int) -> 'Pagination':
        total_pages = math.ceil(total / limit)
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_more=page < total_pages
        )


@dataclass
class TransactionPage:
    data: List[Transaction]
    pagination: Pagination


class TransactionQueryService:
    """Read-side access to an account's transactions"""

    def __init__(
        self,
        account_store: AccountStore,
        transaction_store: TransactionStore,
        default_page_size: int = 10,
        max_page_size: int = 100
    ):
        self.account_store = account_store
        self.transaction_store = transaction_store
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def _require_account(self, account_id: str) -> None:
        if not await self.account_store.exists(account_id):
            raise NotFoundError(f"Account with ID {account_id} not found")

    async def list_transactions(
        self,
        account_id: str,
        page: Any = None,
        limit: Any = None,
        transaction_type: Any = None,
        start_date: Any = None,
        end_date: Any = None,
        min_amount: Any = None,
        max_amount: Any = None
    ) -> TransactionPage:
        """
        List an account's transactions

        Parameters are validated first (ValidationError lists every bad
        value), then the account must exist (NotFoundError).
        """
        query = validate_transaction_query(
            page=page,
            limit=limit,
            transaction_type=transaction_type,
            start_date=start_date,
            end_date=end_date,
            min_amount=min_amount,
            max_amount=max_amount,
            default_limit=self.default_page_size,
            max_limit=self.max_page_size
        )
        await self._require_account(account_id)

        total = await self.transaction_store.count_matching(account_id, query.filters)
        data = await self.transaction_store.query_page(
            account_id, query.filters, query.page, query.limit
        )
        return TransactionPage(
            data=data,
            pagination=Pagination.compute(query.page, query.limit, total)
        )

    async def get_summary(self, account_id: str) -> TransactionSummary:
        """Per-type totals for an existing account"""
        await self._require_account(account_id)
        return await self.transaction_store.summarize(account_id)
