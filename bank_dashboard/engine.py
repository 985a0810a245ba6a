"""
Transaction Engine Module

Posts transactions against accounts. A posting moves through
VALIDATE -> ACCOUNT_LOOKUP -> BALANCE_CHECK -> COMMIT; every phase before
COMMIT can reject the request without touching storage, and COMMIT writes the
new balance and the transaction record inside one storage transaction.

Postings against the same account are serialized with a per-account lock
held from account lookup through commit, so two concurrent debits can never
both pass the balance check against the same stale balance.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, Optional
from contextlib import asynccontextmanager
import asyncio

from .accounts import AccountStore
from .async_storage import AsyncStorageInterface
from .errors import ApiError, InsufficientFundsError, InternalError
from .logging_config import get_logger, log_action
from .transactions import Transaction, TransactionStore, TransactionType
from .validation import validate_transaction_request


class AccountLocks:
    """Reference-counted registry of per-account asyncio locks"""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, account_id: str):
        lock = self._locks.setdefault(account_id, asyncio.Lock())
        self._users[account_id] = self._users.get(account_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[account_id] -= 1
            if self._users[account_id] == 0:
                del self._users[account_id]
                del self._locks[account_id]

    def __len__(self) -> int:
        return len(self._locks)


@dataclass
class PostingResult:
    """Outcome of a committed posting"""
    new_balance: Decimal
    message: str
    transaction: Transaction


def format_amount(amount: Decimal) -> str:
    return f"${amount:.2f}"


class TransactionEngine:
    """
    Validates and commits transactions with balance checks
    """

    def __init__(
        self,
        storage: AsyncStorageInterface,
        account_store: AccountStore,
        transaction_store: TransactionStore,
        max_amount: Decimal = Decimal("1000000"),
        max_description_length: int = 255
    ):
        self.storage = storage
        self.account_store = account_store
        self.transaction_store = transaction_store
        self.max_amount = max_amount
        self.max_description_length = max_description_length
        self.locks = AccountLocks()
        self.logger = get_logger("bank_dashboard.engine")

    @staticmethod
    def compute_new_balance(balance: Decimal, transaction_type: TransactionType,
                            amount: Decimal) -> Decimal:
        """
        Apply a transaction to a balance

        Raises:
            InsufficientFundsError: if a debit exceeds the balance
        """
        if transaction_type.is_debit:
            if amount > balance:
                raise InsufficientFundsError()
            return balance - amount
        return balance + amount

    async def post_transaction(
        self,
        account_id: str,
        transaction_type: Any,
        amount: Any,
        description: Any = None,
        correlation_id: Optional[str] = None
    ) -> PostingResult:
        """
        Validate and commit a transaction

        Args:
            account_id: Account to post against
            transaction_type: DEPOSIT, WITHDRAWAL or TRANSFER
            amount: Positive amount, at most max_amount
            description: Optional free text
            correlation_id: Request ID for log correlation

        Returns:
            PostingResult with the new balance and the stored transaction

        Raises:
            ValidationError: request violates one or more rules
            NotFoundError: account does not exist
            InsufficientFundsError: debit larger than the balance
            InternalError: storage failed; nothing was committed
        """
        request = validate_transaction_request(
            transaction_type, amount, description,
            max_amount=self.max_amount,
            max_description_length=self.max_description_length
        )

        async with self.locks.hold(account_id):
            account = await self.account_store.get_by_id(account_id)

            try:
                new_balance = self.compute_new_balance(
                    account.balance, request.transaction_type, request.amount
                )
            except InsufficientFundsError:
                log_action(
                    self.logger, "warning", "Posting rejected: insufficient funds",
                    action="post_transaction", resource=f"account:{account_id}",
                    correlation_id=correlation_id,
                    extra={
                        "transaction_type": request.transaction_type.value,
                        "amount": str(request.amount),
                        "balance": str(account.balance)
                    }
                )
                raise

            try:
                async with self.storage.atomic():
                    await self.account_store.update_balance(account_id, new_balance)
                    transaction = await self.transaction_store.insert(
                        account_id=account_id,
                        transaction_type=request.transaction_type,
                        amount=request.amount,
                        description=request.description,
                        created_at=datetime.now(timezone.utc)
                    )
            except Exception as e:
                log_action(
                    self.logger, "error", "Posting rolled back",
                    action="post_transaction", resource=f"account:{account_id}",
                    correlation_id=correlation_id, exc_info=True
                )
                if isinstance(e, ApiError):
                    raise
                raise InternalError("Failed to create transaction") from e

        message = (
            f"{request.transaction_type.value} of {format_amount(request.amount)} "
            f"completed successfully"
        )
        log_action(
            self.logger, "info", message,
            action="post_transaction", resource=f"transaction:{transaction.id}",
            correlation_id=correlation_id,
            extra={
                "account_id": account_id,
                "amount": str(request.amount),
                "new_balance": str(new_balance)
            }
        )
        return PostingResult(new_balance=new_balance, message=message, transaction=transaction)
