from __future__ import annotations

import pytest

from decision_tree.registry import UnknownWorkflowError, WorkflowRegistry
from sample_workflows import AgeCheck, Onboarding


def test_register_and_get() -> None:
    registry = WorkflowRegistry([AgeCheck])
    registry.register(Onboarding, name="onboarding")

    assert registry.get("AgeCheck") is AgeCheck
    assert registry.get("onboarding") is Onboarding
    assert registry.names() == ["AgeCheck", "onboarding"]
    assert "onboarding" in registry


def test_get_unknown_raises() -> None:
    with pytest.raises(UnknownWorkflowError):
        WorkflowRegistry().get("Nope")


def test_register_rejects_non_workflows() -> None:
    with pytest.raises(TypeError):
        WorkflowRegistry().register(dict)  # type: ignore[arg-type]


def test_load_import_path() -> None:
    registry = WorkflowRegistry()

    assert registry.load("sample_workflows:TwoStage").__name__ == "TwoStage"
    assert registry.resolve("TwoStage").__name__ == "TwoStage"


def test_resolve_imports_paths_on_demand() -> None:
    registry = WorkflowRegistry()

    assert registry.resolve("sample_workflows:AgeCheck") is AgeCheck
    assert "AgeCheck" in registry


@pytest.mark.parametrize("path", ["sample_workflows", ":AgeCheck", "sample_workflows:"])
def test_load_rejects_malformed_paths(path: str) -> None:
    with pytest.raises(ValueError):
        WorkflowRegistry().load(path)


def test_load_missing_attribute() -> None:
    with pytest.raises(UnknownWorkflowError):
        WorkflowRegistry().load("sample_workflows:Missing")
