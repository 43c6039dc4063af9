"""Store interfaces required by the workflow engine.

Structural typing only: backends do not need to inherit from these.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar, runtime_checkable

from decision_tree.workflow.steps import Step

T = TypeVar("T")


@runtime_checkable
class WorkflowStore(Protocol):
    """Persistence for one logical workflow identity.

    `run_exclusive` must make "load fingerprint, traverse, save fingerprint"
    atomic with respect to other instantiations of the same identity, and must
    allow the calling thread to re-enter it.
    """

    def run_exclusive(self, fn: Callable[[], T]) -> T: ...

    def load_fingerprint(self) -> str | None: ...

    def save_fingerprint(self, fingerprint: str) -> None: ...

    def load_steps(self) -> list[Step]: ...

    def save_steps(self, steps: Sequence[Step]) -> None: ...


@runtime_checkable
class StoreFactory(Protocol):
    """Opens the store bound to a workflow identity."""

    def open(self, workflow_id: str) -> WorkflowStore: ...
