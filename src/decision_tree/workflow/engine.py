"""Resumable decision-tree workflows.

A :class:`Workflow` subclass declares its tree in ``define``::

    class Onboarding(Workflow):
        def is_adult(self) -> bool:
            return self.inputs["age"] >= 18

        def documents_received(self) -> None:
            pass

        @classmethod
        def define(cls, tree: TreeBuilder) -> None:
            tree.start(lambda ctx: ctx.decide("is_adult"))
            tree.decision(
                "is_adult",
                yes=lambda ctx: ctx.call_once("request_documents", send_request),
                no=lambda ctx: ctx.finish(),
            )
            tree.entry("documents_received", lambda ctx: ctx.finish())

Every instantiation decodes the stored fingerprint, replays the tree from the
root (or from each reached entry point) and writes the fingerprint back, all
inside the store's exclusive unit of work. Side effects are only safe when
wrapped in the ``already_called``/``record_call`` guard pair.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from . import codec
from .context import Signal, TraversalContext
from .definition import START_ENTRY, DecisionNode, EntryNode, NodeTable, TreeBuilder
from .errors import UnknownNodeError
from .state import FINISH_CALL, WorkflowState
from .steps import ENTRY_POINT, IDEMPOTENT_CALL, NO, WORKFLOW_FINISHED, YES, Step

if TYPE_CHECKING:
    from decision_tree.stores.protocols import WorkflowStore

logger = logging.getLogger(__name__)


class Workflow:
    _nodes: ClassVar[NodeTable] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        tree = TreeBuilder(cls, inherited=cls._nodes, reserved=_ENGINE_MEMBERS)
        if "define" in cls.__dict__:
            cls.define(tree)
        cls._nodes = tree.build()

    @classmethod
    def define(cls, tree: TreeBuilder) -> None:
        """Declare the workflow's nodes on `tree`. Subclasses override this."""

    def __init__(self, store: WorkflowStore, /, **inputs: Any) -> None:
        self._store = store
        self.inputs: dict[str, Any] = dict(inputs)
        self._state = WorkflowState()
        store.run_exclusive(self._resume)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} fingerprint={self.fingerprint!r}>"

    # Introspection
    # -------------------------------------------------------------------------

    @classmethod
    def nodes(cls) -> NodeTable:
        return cls._nodes

    @classmethod
    def entry_names(cls) -> list[str]:
        return [name for name, node in cls._nodes.items() if isinstance(node, EntryNode)]

    @classmethod
    def decision_names(cls) -> list[str]:
        return [name for name, node in cls._nodes.items() if isinstance(node, DecisionNode)]

    @property
    def store(self) -> WorkflowStore:
        return self._store

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._state.steps)

    @property
    def finished(self) -> bool:
        return self._state.finished

    @property
    def fingerprint(self) -> str:
        return self._state.fingerprint

    @property
    def entry_points(self) -> tuple[str, ...]:
        return self._state.entry_points

    # Traversal
    # -------------------------------------------------------------------------

    def enter(self, name: str) -> Workflow:
        """Resume the workflow at entry point `name`.

        Returns the workflow so external calls can be chained.
        """

        node = self._nodes.get(name)
        if not isinstance(node, EntryNode):
            raise UnknownNodeError(f"{type(self).__name__} has no entry point '{name}'")
        self._run_entry(node)
        return self

    def _resume(self) -> None:
        self._state = WorkflowState.from_fingerprint(self._store.load_fingerprint())

        if self._state.finished:
            self._state.steps = list(self._store.load_steps())
            logger.debug(
                "Workflow already finished, skipping traversal",
                extra={"workflow": type(self).__name__, "steps": len(self._state.steps)},
            )
        else:
            self._execute()

        self._persist()

    def _execute(self) -> None:
        if not self._state.reached_entry_points:
            self._run_entry(self._start_entry())
            return

        # Entries reached during this replay are traversed by their own
        # invocation; only the previously reached ones are replayed here.
        for name in self._state.entry_points:
            node = self._nodes.get(name)
            if not isinstance(node, EntryNode):
                logger.info(
                    "Skipping entry point that is no longer declared",
                    extra={"workflow": type(self).__name__, "entry": name},
                )
                continue
            self._run_entry(node)

    def _start_entry(self) -> EntryNode:
        node = self._nodes.get(START_ENTRY)
        if not isinstance(node, EntryNode):
            raise UnknownNodeError(f"{type(self).__name__} does not declare a start entry")
        return node

    def _run_entry(self, node: EntryNode) -> Signal:
        if self.finished:
            return Signal.CONTINUE

        if node.name != START_ENTRY:
            self._state.reach(node.name)
        self._state.log(ENTRY_POINT, node.name)
        logger.debug(
            "Entering workflow", extra={"workflow": type(self).__name__, "entry": node.name}
        )

        if node.setup is not None:
            getattr(self, node.setup)()

        return self._store.run_exclusive(lambda: self._traverse_entry(node))

    def _traverse_entry(self, node: EntryNode) -> Signal:
        signal = TraversalContext(self).run(node.body)
        if signal is Signal.STOP:
            logger.debug(
                "Traversal stopped", extra={"workflow": type(self).__name__, "entry": node.name}
            )
        self._persist()
        return signal

    def _run_decision(self, name: str, ctx: TraversalContext) -> Signal:
        node = self._nodes.get(name)
        if not isinstance(node, DecisionNode):
            raise UnknownNodeError(f"{type(self).__name__} has no decision '{name}'")
        if self.finished:
            return Signal.CONTINUE

        if getattr(self, node.predicate)():
            answer, branch = YES, node.yes
        else:
            answer, branch = NO, node.no

        self._state.log(node.name, answer)
        logger.debug(
            "Decision evaluated",
            extra={"workflow": type(self).__name__, "decision": node.name, "answer": answer},
        )
        return ctx.run(branch)

    def _persist(self) -> None:
        fingerprint = self._state.fingerprint
        self._store.save_fingerprint(fingerprint)
        logger.debug(
            "Fingerprint persisted",
            extra={"workflow": type(self).__name__, "fingerprint": fingerprint},
        )

    # Non-idempotent call guard
    # -------------------------------------------------------------------------

    def already_called(self, name: str) -> bool:
        codec.validate_identifier(name)
        self._state.log(IDEMPOTENT_CALL, name)
        return self._state.has_called(name)

    def record_call(self, name: str) -> None:
        self._state.record_call(name)

    def finish(self) -> None:
        self._state.record_call(FINISH_CALL)
        self._state.log(WORKFLOW_FINISHED, FINISH_CALL)
        self._store.save_steps(list(self._state.steps))
        logger.info(
            "Workflow finished",
            extra={"workflow": type(self).__name__, "steps": len(self._state.steps)},
        )


_ENGINE_MEMBERS = frozenset(dir(Workflow))
