from __future__ import annotations


class StoreError(Exception):
    """A store backend failed to load or persist workflow state."""


class StoreLockTimeout(StoreError):
    """The exclusive unit of work for a workflow could not be acquired in time."""

    def __init__(self, workflow_id: str, timeout: float) -> None:
        self.workflow_id = workflow_id
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s waiting for workflow {workflow_id!r}")
