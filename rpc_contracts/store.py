"""
Contract store

Per-service registry: method identifier -> MethodContract.

Registrations happen at service setup time, verification on every call, so
access is guarded by a read-write lock (shared reads, exclusive writes).
Stored contracts are immutable; a reader only needs the lock while it looks
the contract up.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .schemas import MethodContract


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers go first."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class ContractStore:
    """Method contracts of one service instance."""

    def __init__(self):
        self._contracts: Dict[str, MethodContract] = {}
        self._lock = ReadWriteLock()

    def register(self, method_id: str, contract: MethodContract) -> None:
        """Insert or replace the contract of method_id (no merge)."""
        with self._lock.write():
            self._contracts[method_id] = contract

    def is_configured(self, method_id: str) -> bool:
        with self._lock.read():
            return method_id in self._contracts

    def get(self, method_id: str) -> Optional[MethodContract]:
        with self._lock.read():
            return self._contracts.get(method_id)

    def methods(self) -> List[str]:
        with self._lock.read():
            return list(self._contracts)

    def __contains__(self, method_id) -> bool:
        return self.is_configured(method_id)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._contracts)
