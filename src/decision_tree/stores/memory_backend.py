"""In-memory store backend, for tests and single-process embedding."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from decision_tree.stores.base import ExclusiveStore, validate_workflow_id
from decision_tree.workflow.steps import Step


@dataclass
class _Record:
    fingerprint: str | None = None
    steps: list[Step] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)


class MemoryStore(ExclusiveStore):
    """Dict-backed store for a single workflow identity."""

    def __init__(self, workflow_id: str = "default", *, record: _Record | None = None) -> None:
        super().__init__(workflow_id)
        self._record = record if record is not None else _Record()

    def _acquire(self) -> None:
        self._record.lock.acquire()

    def _release(self) -> None:
        self._record.lock.release()

    def load_fingerprint(self) -> str | None:
        return self._record.fingerprint

    def save_fingerprint(self, fingerprint: str) -> None:
        self._record.fingerprint = fingerprint

    def load_steps(self) -> list[Step]:
        return list(self._record.steps)

    def save_steps(self, steps: Sequence[Step]) -> None:
        self._record.steps = list(steps)


class MemoryStoreFactory:
    """Hands out memory stores that share records by workflow id."""

    def __init__(self) -> None:
        self._records: dict[str, _Record] = {}
        self._lock = threading.Lock()

    def open(self, workflow_id: str) -> MemoryStore:
        validate_workflow_id(workflow_id)
        with self._lock:
            record = self._records.setdefault(workflow_id, _Record())
        return MemoryStore(workflow_id, record=record)
