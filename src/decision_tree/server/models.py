"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from decision_tree.workflow.steps import Step


class RunRequest(BaseModel):
    inputs: dict[str, Any] = Field(default_factory=dict)


class WorkflowType(BaseModel):
    name: str
    entries: list[str]
    decisions: list[str]


class WorkflowSnapshot(BaseModel):
    workflow: str
    workflow_id: str
    fingerprint: str
    entry_points: list[str]
    calls: list[str]
    finished: bool
    steps: list[Step] = Field(default_factory=list)
