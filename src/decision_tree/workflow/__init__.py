"""Decision-tree workflow core.

This package contains:
- the position codec that turns a workflow position into a fingerprint
- the in-memory workflow state and its step log
- node declaration (decisions, entries) and the traversal context
- the :class:`Workflow` engine that replays and persists a tree
"""

from .context import Signal, TraversalContext
from .definition import START_ENTRY, DecisionNode, EntryNode, TreeBuilder
from .engine import Workflow
from .errors import (
    DuplicateNodeError,
    IncompleteBranchesError,
    InvalidIdentifierError,
    MalformedFingerprintError,
    MissingPredicateError,
    UnknownNodeError,
    WorkflowDefinitionError,
)
from .state import FINISH_CALL, WorkflowState
from .steps import Step

__all__ = [
    "DecisionNode",
    "DuplicateNodeError",
    "EntryNode",
    "FINISH_CALL",
    "IncompleteBranchesError",
    "InvalidIdentifierError",
    "MalformedFingerprintError",
    "MissingPredicateError",
    "START_ENTRY",
    "Signal",
    "Step",
    "TraversalContext",
    "TreeBuilder",
    "UnknownNodeError",
    "Workflow",
    "WorkflowDefinitionError",
    "WorkflowState",
]
