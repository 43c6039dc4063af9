"""Unit tests for the in-memory workflow state."""

from __future__ import annotations

import pytest

from decision_tree.workflow import FINISH_CALL, Step, WorkflowState
from decision_tree.workflow.errors import InvalidIdentifierError


def test_reach_is_idempotent_and_keeps_first_order() -> None:
    state = WorkflowState()

    assert state.reach("b") is True
    assert state.reach("a") is True
    assert state.reach("b") is False

    assert state.entry_points == ("b", "a")


def test_finished_is_derived_from_calls() -> None:
    state = WorkflowState.from_fingerprint("approve:notify")
    assert state.finished is False

    state.record_call(FINISH_CALL)

    assert state.finished is True
    assert state.fingerprint == "approve:finish!/notify"


def test_from_fingerprint_missing_is_empty() -> None:
    state = WorkflowState.from_fingerprint(None)

    assert state.entry_points == ()
    assert state.executed_calls == set()
    assert state.fingerprint == ":"


def test_record_call_rejects_separators() -> None:
    with pytest.raises(InvalidIdentifierError):
        WorkflowState().record_call("charge/card")


def test_log_appends_immutable_steps() -> None:
    state = WorkflowState()
    step = state.log("Entry Point", "approve")

    assert state.steps == [Step(kind="Entry Point", detail="approve")]
    with pytest.raises(Exception):
        step.kind = "changed"  # type: ignore[misc]
