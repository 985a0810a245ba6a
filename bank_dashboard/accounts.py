"""
Account Management Module

Manages account records: listing, lookup, creation, balance updates and
deletion. Balances change only through the transaction engine.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from enum import Enum
import asyncio
import uuid

from .async_storage import AsyncStorageInterface
from .errors import NotFoundError, ValidationError, storage_errors
from .logging_config import get_logger, log_action
from .storage import StorageRecord


class AccountType(Enum):
    """Banking product types"""
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"


@dataclass
class Account(StorageRecord):
    """Balance-bearing account owned by a single holder"""
    account_number: str
    account_type: AccountType
    account_holder: str
    balance: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(
            id=data["id"],
            created_at=datetime.fromisoformat(data["created_at"]),
            account_number=data["account_number"],
            account_type=AccountType(data["account_type"]),
            account_holder=data["account_holder"],
            balance=Decimal(data["balance"]),
        )


@dataclass
class NewAccount:
    """Validated account creation request"""
    account_number: str
    account_type: AccountType
    account_holder: str
    initial_balance: Decimal = Decimal("0")


class AccountStore:
    """
    Account persistence on top of the async storage backend
    """

    def __init__(self, storage: AsyncStorageInterface):
        self.storage = storage
        self.table_name = "accounts"
        self.logger = get_logger("bank_dashboard.accounts")
        self._create_lock = asyncio.Lock()

    async def get_all(self) -> List[Account]:
        """All accounts, most recently created first"""
        with storage_errors("Failed to retrieve accounts", self.logger):
            rows = await self.storage.load_all(self.table_name)
        accounts = [Account.from_dict(row) for row in rows]
        accounts.sort(key=lambda account: account.created_at, reverse=True)
        return accounts

    async def get_by_id(self, account_id: str) -> Account:
        """Get account by ID or raise NotFoundError"""
        with storage_errors("Failed to retrieve account", self.logger):
            row = await self.storage.load(self.table_name, account_id)
        if not row:
            raise NotFoundError(f"Account with ID {account_id} not found")
        return Account.from_dict(row)

    async def exists(self, account_id: str) -> bool:
        with storage_errors("Failed to retrieve account", self.logger):
            return await self.storage.exists(self.table_name, account_id)

    async def create(
        self,
        request: NewAccount,
        account_id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ) -> Account:
        """
        Create a new account

        Args:
            request: Validated creation request
            account_id: Explicit id (generated if not provided)
            created_at: Explicit creation time (now if not provided)

        Returns:
            Created Account object
        """
        account = Account(
            id=account_id or str(uuid.uuid4()),
            created_at=created_at or datetime.now(timezone.utc),
            account_number=request.account_number,
            account_type=request.account_type,
            account_holder=request.account_holder,
            balance=request.initial_balance,
        )

        # Account numbers are unique: the lookup and the save must not interleave
        async with self._create_lock:
            with storage_errors("Failed to create account", self.logger):
                duplicates = await self.storage.find(
                    self.table_name, {"account_number": request.account_number}
                )
            if duplicates:
                raise ValidationError(
                    "Validation failed",
                    [f"Account number {request.account_number} already exists"]
                )
            with storage_errors("Failed to create account", self.logger):
                await self.storage.save(self.table_name, account.id, account.to_dict())

        log_action(
            self.logger, "info", f"Account created: {account.account_number}",
            action="create_account", resource=f"account:{account.id}",
            extra={
                "account_type": account.account_type.value,
                "initial_balance": str(account.balance)
            }
        )
        return account

    async def update_balance(self, account_id: str, new_balance: Decimal) -> Account:
        """Overwrite the balance of an existing account"""
        account = await self.get_by_id(account_id)
        account.balance = new_balance
        with storage_errors("Failed to update account balance", self.logger):
            await self.storage.save(self.table_name, account.id, account.to_dict())
        return account

    async def delete(self, account_id: str) -> None:
        """Delete an account; its transactions are kept"""
        with storage_errors("Failed to delete account", self.logger):
            deleted = await self.storage.delete(self.table_name, account_id)
        if not deleted:
            raise NotFoundError(f"Account with ID {account_id} not found")

        log_action(
            self.logger, "info", "Account deleted",
            action="delete_account", resource=f"account:{account_id}"
        )
