"""
Banking system container and request dependencies
"""

from decimal import Decimal
from typing import Optional

from fastapi import Request

from ..accounts import AccountStore
from ..async_storage import AsyncStorageInterface, create_async_storage
from ..config import BankDashboardConfig, get_config
from ..engine import TransactionEngine
from ..queries import TransactionQueryService
from ..transactions import TransactionStore


class BankingSystem:
    """Storage, stores, engine and query service wired to one backend"""
    
    def __init__(
        self,
        storage: Optional[AsyncStorageInterface] = None,
        config: Optional[BankDashboardConfig] = None
    ):
        self.config = config or get_config()
        self.storage = storage or create_async_storage()
        
        self.account_store = AccountStore(self.storage)
        self.transaction_store = TransactionStore(self.storage)
        self.engine = TransactionEngine(
            self.storage, self.account_store, self.transaction_store,
            max_amount=Decimal(self.config.max_transaction_amount),
            max_description_length=self.config.max_description_length
        )
        self.queries = TransactionQueryService(
            self.account_store, self.transaction_store,
            default_page_size=self.config.default_page_size,
            max_page_size=self.config.max_page_size
        )
    
    async def close(self) -> None:
        await self.storage.close()


# Dependency to get the banking system owned by the running app
def get_banking_system(request: Request) -> BankingSystem:
    return request.app.state.banking_system


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)
