from __future__ import annotations

import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional


class MemoryDatabase:
    """Process-local table store shared by the in-memory repositories.

    Each table maps an integer id to a frozen model. Writes go through
    ``transaction()`` so a Flask dev server running threads sees whole updates.
    """

    _instance: Optional["MemoryDatabase"] = None

    def __init__(self):
        self._lock = threading.RLock()
        self._tables: Dict[str, Dict[int, Any]] = defaultdict(dict)
        self._sequences: Dict[str, int] = defaultdict(int)

    @classmethod
    def get_instance(cls) -> "MemoryDatabase":
        if cls._instance is None:
            cls._instance = MemoryDatabase()
        return cls._instance

    @contextmanager
    def transaction(self) -> Iterator["MemoryDatabase"]:
        with self._lock:
            yield self

    def table(self, name: str) -> Dict[int, Any]:
        return self._tables[name]

    def next_id(self, name: str) -> int:
        with self._lock:
            self._sequences[name] += 1
            return self._sequences[name]
