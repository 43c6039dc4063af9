from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .definition import Body
    from .engine import Workflow


class Signal(str, Enum):
    CONTINUE = "continue"
    STOP = "stop"


class TraversalContext:
    """Primitives available to a branch body.

    One context exists per traversal unit: the evaluation of a single entry
    body, including every decision reached from it. Calling :meth:`stop` ends
    the unit; nodes invoked afterwards through the same context do nothing.

    Bodies should return the result of :meth:`stop` (or of a node invocation)
    so the signal travels back up the call chain::

        def body(ctx):
            if ctx.workflow.waiting_for_reply():
                return ctx.stop()
            return ctx.decide("reply_accepted")
    """

    def __init__(self, workflow: Workflow) -> None:
        self._workflow = workflow
        self._stopped = False

    @property
    def workflow(self) -> Workflow:
        return self._workflow

    @property
    def inputs(self) -> dict[str, Any]:
        return self._workflow.inputs

    @property
    def stopped(self) -> bool:
        return self._stopped

    def decide(self, name: str) -> Signal:
        if self._stopped:
            return Signal.STOP
        return self._workflow._run_decision(name, self)

    def enter(self, name: str) -> Signal:
        if self._stopped:
            return Signal.STOP
        self._workflow.enter(name)
        return Signal.CONTINUE

    def already_called(self, name: str) -> bool:
        return self._workflow.already_called(name)

    def record_call(self, name: str) -> None:
        self._workflow.record_call(name)

    def call_once(self, name: str, fn: Callable[[], object]) -> bool:
        """Run `fn` unless `name` was already recorded; returns True if it ran."""

        if self.already_called(name):
            return False
        fn()
        self.record_call(name)
        return True

    def finish(self) -> None:
        self._workflow.finish()

    def stop(self) -> Signal:
        self._stopped = True
        return Signal.STOP

    def run(self, body: Body) -> Signal:
        result = body(self)
        if result is Signal.STOP:
            self._stopped = True
        return Signal.STOP if self._stopped else Signal.CONTINUE
