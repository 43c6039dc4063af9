from __future__ import annotations

from pydantic import BaseModel, ConfigDict

ENTRY_POINT = "Entry Point"
IDEMPOTENT_CALL = "idempotent_call"
WORKFLOW_FINISHED = "Workflow Finished"

YES = "YES"
NO = "NO"


class Step(BaseModel):
    """A single traversal event.

    Steps form an audit trail of what a traversal did. They never drive control
    flow; the fingerprint alone decides where a workflow resumes.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    detail: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.detail}"
