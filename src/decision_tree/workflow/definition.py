"""Declaration of decision and entry nodes.

Workflow classes declare their tree through a :class:`TreeBuilder`. The builder
validates every node while the class is being created, so an invalid tree fails
at import time rather than halfway through a traversal.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeAlias

from .codec import validate_identifier
from .errors import (
    DuplicateNodeError,
    IncompleteBranchesError,
    MissingPredicateError,
    WorkflowDefinitionError,
)

if TYPE_CHECKING:
    from .context import Signal, TraversalContext

# Root entry evaluated when no entry point has been reached yet.
START_ENTRY = "__start_workflow"

Body: TypeAlias = "Callable[[TraversalContext], Signal | None]"


@dataclass(frozen=True, slots=True)
class DecisionNode:
    name: str
    predicate: str
    yes: Body
    no: Body


@dataclass(frozen=True, slots=True)
class EntryNode:
    """An externally invocable resumption point.

    `setup` names the workflow method called before the body runs. The root
    entry has no setup method.
    """

    name: str
    setup: str | None
    body: Body


Node: TypeAlias = DecisionNode | EntryNode
NodeTable: TypeAlias = Mapping[str, Node]


class TreeBuilder:
    """Collects node declarations for one workflow class."""

    def __init__(
        self,
        workflow_cls: type,
        *,
        inherited: NodeTable | None = None,
        reserved: frozenset[str] = frozenset(),
    ) -> None:
        self._workflow_cls = workflow_cls
        self._nodes: dict[str, Node] = dict(inherited or {})
        self._declared: set[str] = set()
        self._reserved = reserved

    @property
    def workflow_name(self) -> str:
        return self._workflow_cls.__qualname__

    def start(self, body: Body) -> TreeBuilder:
        if body is None:
            raise WorkflowDefinitionError(f"start on {self.workflow_name} requires a body")
        self._add(EntryNode(name=START_ENTRY, setup=None, body=body))
        return self

    def decision(self, name: str, *, yes: Body | None = None, no: Body | None = None) -> TreeBuilder:
        self._require_method(name)
        if yes is None or no is None:
            raise IncompleteBranchesError(self.workflow_name, name)
        self._add(DecisionNode(name=name, predicate=name, yes=yes, no=no))
        return self

    def entry(self, name: str, body: Body) -> TreeBuilder:
        validate_identifier(name)
        self._require_method(name)
        if body is None:
            raise WorkflowDefinitionError(f"Entry '{name}' on {self.workflow_name} requires a body")
        self._add(EntryNode(name=name, setup=name, body=body))
        return self

    def build(self) -> NodeTable:
        return MappingProxyType(dict(self._nodes))

    def _require_method(self, name: str) -> None:
        if name in self._reserved:
            raise WorkflowDefinitionError(
                f"Node '{name}' on {self.workflow_name} shadows a Workflow member"
            )
        if not callable(getattr(self._workflow_cls, name, None)):
            raise MissingPredicateError(self.workflow_name, name)

    def _add(self, node: Node) -> None:
        if node.name in self._declared:
            raise DuplicateNodeError(f"Node '{node.name}' is declared twice on {self.workflow_name}")
        self._declared.add(node.name)
        self._nodes[node.name] = node
