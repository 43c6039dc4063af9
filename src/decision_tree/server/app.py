"""FastAPI app factory.

Every request instantiates the workflow afresh against its store, so each
incoming event resumes the workflow from its persisted fingerprint.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from fastapi import FastAPI, HTTPException

from decision_tree import __version__
from decision_tree.core.config import DecisionTreeConfig
from decision_tree.registry import UnknownWorkflowError, WorkflowRegistry
from decision_tree.server.models import RunRequest, WorkflowSnapshot, WorkflowType
from decision_tree.stores import (
    StoreError,
    StoreFactory,
    StoreLockTimeout,
    WorkflowStore,
    create_store_factory,
)
from decision_tree.workflow import (
    FINISH_CALL,
    START_ENTRY,
    MalformedFingerprintError,
    Workflow,
    codec,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _snapshot(name: str, workflow_id: str, workflow: Workflow) -> WorkflowSnapshot:
    state = workflow.state
    return WorkflowSnapshot(
        workflow=name,
        workflow_id=workflow_id,
        fingerprint=state.fingerprint,
        entry_points=list(state.entry_points),
        calls=sorted(state.executed_calls),
        finished=state.finished,
        steps=list(state.steps),
    )


def _public_entries(cls: type[Workflow]) -> list[str]:
    return [name for name in cls.entry_names() if name != START_ENTRY]


def create_app(
    config: DecisionTreeConfig | None = None,
    registry: WorkflowRegistry | None = None,
    stores: StoreFactory | None = None,
) -> FastAPI:
    if config is None:
        config = DecisionTreeConfig()
    if registry is None:
        registry = WorkflowRegistry()
    for path in config.workflow_paths():
        registry.load(path)
    if stores is None:
        stores = create_store_factory(config)

    app = FastAPI(
        title="Decision Tree Workflows",
        version=__version__,
        description="REST API for resuming decision-tree workflows per incoming event.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.config = config
    app.state.registry = registry
    app.state.stores = stores

    def _workflow_cls(name: str) -> type[Workflow]:
        try:
            return registry.get(name)
        except UnknownWorkflowError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e

    def _run(workflow_id: str, fn: Callable[[WorkflowStore], T]) -> T:
        try:
            store = stores.open(workflow_id)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        try:
            return fn(store)
        except StoreLockTimeout as e:
            logger.warning(str(e), extra={"workflow_id": workflow_id})
            raise HTTPException(status_code=503, detail=str(e)) from e
        except StoreError as e:
            logger.exception("Store failure", extra={"workflow_id": workflow_id})
            raise HTTPException(status_code=503, detail=str(e)) from e

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.get("/api/v1/workflows", response_model=list[WorkflowType])
    def list_workflows() -> list[WorkflowType]:
        return [
            WorkflowType(
                name=name,
                entries=_public_entries(registry.get(name)),
                decisions=registry.get(name).decision_names(),
            )
            for name in registry.names()
        ]

    @app.get("/api/v1/workflows/{name}/{workflow_id}", response_model=WorkflowSnapshot)
    def get_workflow(name: str, workflow_id: str) -> WorkflowSnapshot:
        _workflow_cls(name)

        def load(store: WorkflowStore) -> WorkflowSnapshot:
            fingerprint = store.load_fingerprint()
            try:
                entries, calls = codec.decode(fingerprint)
            except MalformedFingerprintError as e:
                raise HTTPException(status_code=500, detail=str(e)) from e
            return WorkflowSnapshot(
                workflow=name,
                workflow_id=workflow_id,
                fingerprint=fingerprint or "",
                entry_points=list(entries),
                calls=sorted(calls),
                finished=FINISH_CALL in calls,
                steps=store.load_steps(),
            )

        return _run(workflow_id, lambda store: store.run_exclusive(lambda: load(store)))

    @app.post("/api/v1/workflows/{name}/{workflow_id}", response_model=WorkflowSnapshot)
    def run_workflow(
        name: str, workflow_id: str, req: RunRequest | None = None
    ) -> WorkflowSnapshot:
        cls = _workflow_cls(name)
        inputs = req.inputs if req is not None else {}
        workflow = _run(workflow_id, lambda store: cls(store, **inputs))
        logger.info(
            "Workflow resumed",
            extra={"workflow": name, "workflow_id": workflow_id, "finished": workflow.finished},
        )
        return _snapshot(name, workflow_id, workflow)

    @app.post(
        "/api/v1/workflows/{name}/{workflow_id}/entries/{entry}",
        response_model=WorkflowSnapshot,
    )
    def enter_workflow(
        name: str, workflow_id: str, entry: str, req: RunRequest | None = None
    ) -> WorkflowSnapshot:
        cls = _workflow_cls(name)
        if entry not in _public_entries(cls):
            raise HTTPException(status_code=404, detail=f"{name} has no entry point '{entry}'")
        inputs = req.inputs if req is not None else {}
        workflow = _run(
            workflow_id,
            lambda store: store.run_exclusive(lambda: cls(store, **inputs).enter(entry)),
        )
        logger.info(
            "Workflow entered",
            extra={"workflow": name, "workflow_id": workflow_id, "entry": entry},
        )
        return _snapshot(name, workflow_id, workflow)

    return app
