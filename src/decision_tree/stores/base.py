from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from decision_tree.stores.errors import StoreError

T = TypeVar("T")

logger = logging.getLogger(__name__)

_WORKFLOW_ID_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_workflow_id(workflow_id: str) -> str:
    if not _WORKFLOW_ID_RE.match(workflow_id) or workflow_id in {".", ".."}:
        raise ValueError(f"Invalid workflow id: {workflow_id!r}")
    return workflow_id


class ExclusiveStore:
    """Re-entrant exclusive unit of work shared by the store backends.

    The engine opens a unit of work for the whole instantiation and another for
    every entry invoked inside it, so the same thread must be able to re-enter.
    Only the outermost level calls `_acquire` / `_release`.
    """

    def __init__(self, workflow_id: str) -> None:
        self.workflow_id = validate_workflow_id(workflow_id)
        self._local = threading.local()

    def _acquire(self) -> None:
        raise NotImplementedError

    def _release(self) -> None:
        raise NotImplementedError

    @property
    def _depth(self) -> int:
        return getattr(self._local, "depth", 0)

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        if self._depth == 0:
            self._acquire()
        self._local.depth = self._depth + 1
        try:
            yield
        except BaseException:
            self._local.depth = self._depth - 1
            if self._depth == 0:
                self._release_after_error()
            raise
        self._local.depth = self._depth - 1
        if self._depth == 0:
            self._release()

    def _release_after_error(self) -> None:
        # The error already propagating wins over a failed release.
        try:
            self._release()
        except StoreError:
            logger.warning(
                "Lock release failed while handling an error",
                extra={"workflow_id": self.workflow_id},
                exc_info=True,
            )

    def run_exclusive(self, fn: Callable[[], T]) -> T:
        with self.exclusive():
            return fn()
