from __future__ import annotations

from dataclasses import dataclass, field

from . import codec
from .steps import Step

# Recording this call name marks the workflow as permanently finished.
FINISH_CALL = "finish!"


@dataclass(slots=True)
class WorkflowState:
    """In-memory position of one workflow instantiation.

    Both collections only ever grow. `finished` is derived from the recorded
    calls on every read so it cannot drift from the fingerprint.
    """

    reached_entry_points: dict[str, None] = field(default_factory=dict)
    executed_calls: set[str] = field(default_factory=set)
    steps: list[Step] = field(default_factory=list)

    @classmethod
    def from_fingerprint(cls, fingerprint: str | None) -> WorkflowState:
        entries, calls = codec.decode(fingerprint)
        return cls(reached_entry_points=dict.fromkeys(entries), executed_calls=set(calls))

    @property
    def fingerprint(self) -> str:
        return codec.encode(self.reached_entry_points, self.executed_calls)

    @property
    def entry_points(self) -> tuple[str, ...]:
        return tuple(self.reached_entry_points)

    @property
    def finished(self) -> bool:
        return FINISH_CALL in self.executed_calls

    def reach(self, name: str) -> bool:
        """Record an entry point; returns False if it was already reached."""

        if name in self.reached_entry_points:
            return False
        self.reached_entry_points[name] = None
        return True

    def record_call(self, name: str) -> None:
        self.executed_calls.add(codec.validate_identifier(name))

    def has_called(self, name: str) -> bool:
        return name in self.executed_calls

    def log(self, kind: str, detail: str) -> Step:
        step = Step(kind=kind, detail=detail)
        self.steps.append(step)
        return step
