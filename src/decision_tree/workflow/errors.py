"""Errors raised by workflow definitions and the position codec."""

from __future__ import annotations


class WorkflowDefinitionError(Exception):
    """A workflow class declares an invalid tree.

    These are raised while the class body is being processed and must be fixed
    in the workflow definition rather than caught.
    """


class MissingPredicateError(WorkflowDefinitionError):
    """A decision or entry names a predicate/setup method the workflow lacks."""

    def __init__(self, workflow: str, name: str) -> None:
        self.workflow = workflow
        self.name = name
        super().__init__(f"Method '{name}' is not defined on {workflow}")


class IncompleteBranchesError(WorkflowDefinitionError):
    """A decision was declared without both a yes and a no body."""

    def __init__(self, workflow: str, name: str) -> None:
        self.workflow = workflow
        self.name = name
        super().__init__(f"Decision '{name}' on {workflow} requires both yes and no bodies")


class DuplicateNodeError(WorkflowDefinitionError):
    pass


class InvalidIdentifierError(ValueError):
    pass


class MalformedFingerprintError(ValueError):
    pass


class UnknownNodeError(LookupError):
    pass
