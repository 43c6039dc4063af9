"""Lookup of workflow classes by name.

The server and CLI instantiate workflows by name, once per incoming event.
Classes are registered explicitly or loaded from `package.module:ClassName`
import paths.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable

from decision_tree.workflow.engine import Workflow

logger = logging.getLogger(__name__)


class UnknownWorkflowError(LookupError):
    pass


class WorkflowRegistry:
    def __init__(self, workflows: Iterable[type[Workflow]] = ()) -> None:
        self._workflows: dict[str, type[Workflow]] = {}
        for cls in workflows:
            self.register(cls)

    def register(self, cls: type[Workflow], name: str | None = None) -> type[Workflow]:
        if not (isinstance(cls, type) and issubclass(cls, Workflow)):
            raise TypeError(f"{cls!r} is not a Workflow subclass")
        key = name or cls.__name__
        self._workflows[key] = cls
        logger.debug("Workflow registered", extra={"workflow": key})
        return cls

    def get(self, name: str) -> type[Workflow]:
        try:
            return self._workflows[name]
        except KeyError:
            raise UnknownWorkflowError(f"Unknown workflow: {name}") from None

    def names(self) -> list[str]:
        return sorted(self._workflows)

    def __contains__(self, name: object) -> bool:
        return name in self._workflows

    def load(self, import_path: str) -> type[Workflow]:
        """Import and register `package.module:ClassName`."""

        module_name, sep, attr = import_path.partition(":")
        if not sep or not module_name or not attr:
            raise ValueError(f"Expected 'package.module:ClassName', got {import_path!r}")
        module = importlib.import_module(module_name)
        try:
            cls = getattr(module, attr)
        except AttributeError:
            raise UnknownWorkflowError(f"{module_name} has no attribute {attr!r}") from None
        return self.register(cls)

    def resolve(self, name_or_path: str) -> type[Workflow]:
        """Return a registered workflow, importing it first for import paths."""

        if name_or_path in self._workflows:
            return self._workflows[name_or_path]
        if ":" in name_or_path:
            return self.load(name_or_path)
        return self.get(name_or_path)
