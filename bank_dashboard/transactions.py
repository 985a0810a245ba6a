"""
Transaction Storage Module

Append-only store of posted transactions. Supports filtered counts,
newest-first pages and per-type totals for an account.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from enum import Enum

from .async_storage import AsyncStorageInterface
from .errors import storage_errors
from .logging_config import get_logger
from .storage import StorageRecord


class TransactionType(Enum):
    """Types of banking transactions"""
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    TRANSFER = "TRANSFER"

    @property
    def is_debit(self) -> bool:
        return self in (TransactionType.WITHDRAWAL, TransactionType.TRANSFER)


@dataclass
class Transaction(StorageRecord):
    """
    Posted transaction. The amount is always positive; its direction
    follows from the transaction type.
    """
    account_id: str
    transaction_type: TransactionType
    amount: Decimal
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            id=int(data["id"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            account_id=data["account_id"],
            transaction_type=TransactionType(data["transaction_type"]),
            amount=Decimal(data["amount"]),
            description=data.get("description") or "",
        )


@dataclass
class TransactionFilters:
    """Conjunctive transaction filters; every bound is inclusive"""
    transaction_type: Optional[TransactionType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None

    def matches(self, transaction: Transaction) -> bool:
        if self.transaction_type and transaction.transaction_type != self.transaction_type:
            return False
        if self.start_date and transaction.created_at < self.start_date:
            return False
        if self.end_date and transaction.created_at > self.end_date:
            return False
        if self.min_amount is not None and transaction.amount < self.min_amount:
            return False
        if self.max_amount is not None and transaction.amount > self.max_amount:
            return False
        return True


@dataclass
class TransactionSummary:
    """Per-type totals for one account"""
    total_deposits: Decimal = Decimal("0")
    total_withdrawals: Decimal = Decimal("0")
    total_transfers: Decimal = Decimal("0")
    transaction_count: int = 0


class TransactionStore:
    """
    Transaction persistence on top of the async storage backend
    """

    def __init__(self, storage: AsyncStorageInterface):
        self.storage = storage
        self.table_name = "transactions"
        self.logger = get_logger("bank_dashboard.transactions")

    async def _load_for_account(self, account_id: str) -> List[Transaction]:
        with storage_errors("Failed to retrieve transactions", self.logger):
            rows = await self.storage.find(self.table_name, {"account_id": account_id})
        return [Transaction.from_dict(row) for row in rows]

    async def _matching(self, account_id: str,
                        filters: Optional[TransactionFilters]) -> List[Transaction]:
        """Matching transactions, newest first"""
        transactions = await self._load_for_account(account_id)
        if filters:
            transactions = [txn for txn in transactions if filters.matches(txn)]
        transactions.sort(key=lambda txn: (txn.created_at, txn.id), reverse=True)
        return transactions

    async def count_matching(self, account_id: str,
                             filters: Optional[TransactionFilters] = None) -> int:
        """Count transactions of an account satisfying all filters"""
        return len(await self._matching(account_id, filters))

    async def query_page(
        self,
        account_id: str,
        filters: Optional[TransactionFilters],
        page: int,
        limit: int
    ) -> List[Transaction]:
        """Return up to `limit` matching transactions starting at (page-1)*limit"""
        offset = (page - 1) * limit
        transactions = await self._matching(account_id, filters)
        return transactions[offset:offset + limit]

    async def insert(
        self,
        account_id: str,
        transaction_type: TransactionType,
        amount: Decimal,
        description: Optional[str],
        created_at: datetime
    ) -> Transaction:
        """Persist a new transaction and return it with its assigned id"""
        with storage_errors("Failed to create transaction", self.logger):
            transaction_id = await self.storage.next_id(self.table_name)
            transaction = Transaction(
                id=transaction_id,
                created_at=created_at,
                account_id=account_id,
                transaction_type=transaction_type,
                amount=amount,
                description=description or "",
            )
            await self.storage.save(self.table_name, str(transaction_id), transaction.to_dict())
        return transaction

    async def summarize(self, account_id: str) -> TransactionSummary:
        """Sum amounts per transaction type and count all rows"""
        summary = TransactionSummary()
        for txn in await self._load_for_account(account_id):
            if txn.transaction_type == TransactionType.DEPOSIT:
                summary.total_deposits += txn.amount
            elif txn.transaction_type == TransactionType.WITHDRAWAL:
                summary.total_withdrawals += txn.amount
            elif txn.transaction_type == TransactionType.TRANSFER:
                summary.total_transfers += txn.amount
            summary.transaction_count += 1
        return summary
