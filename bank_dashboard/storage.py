"""
Storage Backend Module

Provides the abstract storage interface and the in-memory relational store
backing the dashboard. Records are plain dictionaries keyed by table and
record id; monetary values are stored as Decimal strings.
"""

from abc import ABC, abstractmethod
from contextvars import ContextVar
from typing import Dict, List, Optional, Any, Tuple, Union
from decimal import Decimal
from datetime import datetime
from enum import Enum
import json
import threading
from dataclasses import dataclass, asdict
from contextlib import contextmanager


class StorageError(Exception):
    """Raised when the storage backend cannot serve a request"""


@dataclass
class StorageRecord:
    """Base class for all stored records"""
    id: Union[str, int]
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        result = asdict(self)
        result['created_at'] = self.created_at.isoformat()
        for key, value in result.items():
            if isinstance(value, Decimal):
                result[key] = str(value)
            elif isinstance(value, Enum):
                result[key] = value.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StorageRecord':
        """Create instance from dictionary"""
        if 'created_at' in data and isinstance(data['created_at'], str):
            data['created_at'] = datetime.fromisoformat(data['created_at'])

        return cls(**data)


# (table, record_id, previous value or None if the record did not exist)
UndoEntry = Tuple[str, str, Optional[Dict[str, Any]]]


class StorageInterface(ABC):
    """Abstract interface for storage backends"""

    @abstractmethod
    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Save a record to storage"""
        pass

    @abstractmethod
    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a record from storage"""
        pass

    @abstractmethod
    def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all records from a table"""
        pass

    @abstractmethod
    def delete(self, table: str, record_id: str) -> bool:
        """Delete a record from storage"""
        pass

    @abstractmethod
    def exists(self, table: str, record_id: str) -> bool:
        """Check if a record exists"""
        pass

    @abstractmethod
    def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find records matching filters"""
        pass

    @abstractmethod
    def next_id(self, table: str) -> int:
        """Allocate the next integer id for a table"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close storage connection"""
        pass

    def begin_transaction(self) -> None:
        """Start a database transaction (default no-op)"""
        pass

    def commit(self) -> None:
        """Commit current transaction (default no-op)"""
        pass

    def rollback(self) -> None:
        """Rollback current transaction (default no-op)"""
        pass

    @contextmanager
    def atomic(self):
        """Context manager for atomic operations"""
        self.begin_transaction()
        try:
            yield
            self.commit()
        except Exception:
            self.rollback()
            raise


class InMemoryStorage(StorageInterface):
    """
    In-memory storage implementation

    Transactions keep an undo journal in a context variable, so concurrent
    tasks each roll back only their own writes. Sequences are never rolled
    back: an id handed out inside a failed transaction is not reused.
    """

    def __init__(self):
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._sequences: Dict[str, int] = {}
        self._lock = threading.RLock()
        self._journal: ContextVar[Optional[List[UndoEntry]]] = ContextVar(
            f"storage_journal_{id(self)}", default=None
        )
        self._closed = False

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageError("Storage is closed")

    def _ensure_table(self, table: str) -> None:
        """Ensure table exists"""
        if table not in self._data:
            self._data[table] = {}

    def _remember(self, table: str, record_id: str) -> None:
        journal = self._journal.get()
        if journal is not None:
            previous = self._data[table].get(record_id)
            journal.append((table, record_id, previous))

    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Save a record to memory"""
        with self._lock:
            self._ensure_open()
            self._ensure_table(table)
            self._remember(table, record_id)
            # Deep copy to prevent external mutation
            self._data[table][record_id] = json.loads(json.dumps(data, default=str))

    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a record from memory"""
        with self._lock:
            self._ensure_open()
            self._ensure_table(table)
            record = self._data[table].get(record_id)
            if record:
                return json.loads(json.dumps(record))
            return None

    def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all records from a table in insertion order"""
        with self._lock:
            self._ensure_open()
            self._ensure_table(table)
            return [json.loads(json.dumps(record)) for record in self._data[table].values()]

    def delete(self, table: str, record_id: str) -> bool:
        """Delete a record from memory"""
        with self._lock:
            self._ensure_open()
            self._ensure_table(table)
            if record_id in self._data[table]:
                self._remember(table, record_id)
                del self._data[table][record_id]
                return True
            return False

    def exists(self, table: str, record_id: str) -> bool:
        """Check if a record exists"""
        with self._lock:
            self._ensure_open()
            self._ensure_table(table)
            return record_id in self._data[table]

    def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find records whose fields equal every filter value"""
        with self._lock:
            self._ensure_open()
            self._ensure_table(table)
            results = []
            for record in self._data[table].values():
                match = True
                for key, value in filters.items():
                    if key not in record or record[key] != value:
                        match = False
                        break
                if match:
                    results.append(json.loads(json.dumps(record)))
            return results

    def next_id(self, table: str) -> int:
        """Allocate the next integer id for a table, starting at 1"""
        with self._lock:
            self._ensure_open()
            value = self._sequences.get(table, 0) + 1
            self._sequences[table] = value
            return value

    def begin_transaction(self) -> None:
        """Start journaling writes made from the current context"""
        if self._journal.get() is not None:
            raise StorageError("Nested transactions are not supported")
        self._journal.set([])

    def commit(self) -> None:
        """Discard the undo journal, keeping all writes"""
        self._journal.set(None)

    def rollback(self) -> None:
        """Undo every write made since begin_transaction, newest first"""
        journal = self._journal.get()
        self._journal.set(None)
        if not journal:
            return
        with self._lock:
            for table, record_id, previous in reversed(journal):
                if previous is None:
                    self._data[table].pop(record_id, None)
                else:
                    self._data[table][record_id] = previous

    def close(self) -> None:
        """Close storage; later calls raise StorageError"""
        with self._lock:
            self._closed = True

