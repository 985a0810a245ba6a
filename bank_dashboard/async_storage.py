"""
Async Storage Backend Module

Awaitable facade over the record store used by the account and transaction
stores. Request handlers suspend at storage boundaries instead of blocking
the event loop.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional
from contextlib import asynccontextmanager
import asyncio

from .storage import InMemoryStorage


class AsyncStorageInterface(ABC):
    """Record operations the stores depend on"""

    @abstractmethod
    async def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Insert or overwrite a record"""
        pass

    @abstractmethod
    async def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Record by id, or None"""
        pass

    @abstractmethod
    async def load_all(self, table: str) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def delete(self, table: str, record_id: str) -> bool:
        """Remove a record; False if it was not there"""
        pass

    @abstractmethod
    async def exists(self, table: str, record_id: str) -> bool:
        pass

    @abstractmethod
    async def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Records whose fields equal every filter value"""
        pass

    @abstractmethod
    async def next_id(self, table: str) -> int:
        """Next value of the table's integer sequence"""
        pass

    async def close(self) -> None:
        pass

    async def begin_transaction(self) -> None:
        pass

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass

    @asynccontextmanager
    async def atomic(self):
        """Commit every write in the block, or none of them"""
        await self.begin_transaction()
        try:
            yield
            await self.commit()
        except Exception:
            await self.rollback()
            raise


class AsyncInMemoryStorage(AsyncStorageInterface):
    """InMemoryStorage driven from worker threads, one call at a time"""

    def __init__(self, sync_storage: Optional[InMemoryStorage] = None):
        self._sync_storage = sync_storage or InMemoryStorage()
        self._lock = asyncio.Lock()

    @property
    def sync_storage(self) -> InMemoryStorage:
        return self._sync_storage

    async def _run(self, operation: Callable, *args):
        # to_thread copies the task context, so writes still reach its journal
        async with self._lock:
            return await asyncio.to_thread(operation, *args)

    async def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        await self._run(self._sync_storage.save, table, record_id, data)

    async def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        return await self._run(self._sync_storage.load, table, record_id)

    async def load_all(self, table: str) -> List[Dict[str, Any]]:
        return await self._run(self._sync_storage.load_all, table)

    async def delete(self, table: str, record_id: str) -> bool:
        return await self._run(self._sync_storage.delete, table, record_id)

    async def exists(self, table: str, record_id: str) -> bool:
        return await self._run(self._sync_storage.exists, table, record_id)

    async def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        return await self._run(self._sync_storage.find, table, filters)

    async def next_id(self, table: str) -> int:
        return await self._run(self._sync_storage.next_id, table)

    async def close(self) -> None:
        await asyncio.to_thread(self._sync_storage.close)

    # The undo journal lives in the calling task's context, so these run on
    # the loop thread rather than in a worker.

    async def begin_transaction(self) -> None:
        self._sync_storage.begin_transaction()

    async def commit(self) -> None:
        self._sync_storage.commit()

    async def rollback(self) -> None:
        async with self._lock:
            self._sync_storage.rollback()


def create_async_storage() -> AsyncStorageInterface:
    """Storage backend for a new banking system"""
    return AsyncInMemoryStorage()
