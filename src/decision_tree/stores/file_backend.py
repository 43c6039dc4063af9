"""JSON file store backend.

Each workflow identity is persisted to `<root>/<workflow_id>.json`:

    {"fingerprint": "approve:finish!", "steps": [{"kind": ..., "detail": ...}]}

Mutual exclusion is process-local (one lock per file). Several processes
sharing the same directory need a store with a real distributed lock, such as
the redis backend.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from decision_tree.stores.base import ExclusiveStore
from decision_tree.stores.errors import StoreError
from decision_tree.workflow.steps import Step

logger = logging.getLogger(__name__)

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(path, threading.Lock())


class FileStore(ExclusiveStore):
    def __init__(self, root: Path, workflow_id: str) -> None:
        super().__init__(workflow_id)
        self.path = (Path(root) / f"{self.workflow_id}.json").resolve()
        self._lock = _lock_for(self.path)

    def _acquire(self) -> None:
        self._lock.acquire()

    def _release(self) -> None:
        self._lock.release()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt workflow state file {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise StoreError(f"Workflow state file {self.path} is not a JSON object")
        return raw

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def load_fingerprint(self) -> str | None:
        fingerprint = self._load().get("fingerprint")
        return fingerprint if isinstance(fingerprint, str) else None

    def save_fingerprint(self, fingerprint: str) -> None:
        data = self._load()
        data["fingerprint"] = fingerprint
        self._save(data)
        logger.debug("Fingerprint written", extra={"path": str(self.path)})

    def load_steps(self) -> list[Step]:
        raw = self._load().get("steps")
        if not isinstance(raw, list):
            return []
        return [Step.model_validate(item) for item in raw]

    def save_steps(self, steps: Sequence[Step]) -> None:
        data = self._load()
        data["steps"] = [step.model_dump(mode="json") for step in steps]
        self._save(data)
        logger.debug("Step log written", extra={"path": str(self.path), "steps": len(steps)})


class FileStoreFactory:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def open(self, workflow_id: str) -> FileStore:
        return FileStore(self.root, workflow_id)
