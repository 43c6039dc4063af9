"""Unit tests for the memory and file store backends."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from decision_tree.core.config import DecisionTreeConfig, StoreConfig
from decision_tree.stores import (
    FileStore,
    FileStoreFactory,
    MemoryStore,
    MemoryStoreFactory,
    StoreError,
    WorkflowStore,
    create_store_factory,
)
from decision_tree.workflow import Step
from sample_workflows import Onboarding

STEPS = [Step(kind="Entry Point", detail="approve"), Step(kind="approve", detail="YES")]


class TestExclusive:
    def test_same_thread_may_reenter(self, store: MemoryStore) -> None:
        result = store.run_exclusive(lambda: store.run_exclusive(lambda: "inner"))
        assert result == "inner"

    def test_other_thread_waits_for_release(self, store_factory: MemoryStoreFactory) -> None:
        order: list[str] = []
        first = store_factory.open("shared")
        second = store_factory.open("shared")

        def contender() -> None:
            second.run_exclusive(lambda: order.append("second"))

        with first.exclusive():
            thread = threading.Thread(target=contender)
            thread.start()
            thread.join(timeout=0.2)
            assert thread.is_alive()
            order.append("first")

        thread.join()
        assert order == ["first", "second"]

    def test_lock_released_after_error(self, store: MemoryStore) -> None:
        def boom() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            store.run_exclusive(boom)
        assert store.run_exclusive(lambda: "ok") == "ok"

    def test_failed_release_does_not_mask_error(
        self, store: MemoryStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        release = MemoryStore._release

        def failing_release(self: MemoryStore) -> None:
            release(self)
            raise StoreError("lock lost")

        monkeypatch.setattr(MemoryStore, "_release", failing_release)

        def boom() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            store.run_exclusive(boom)
        with pytest.raises(StoreError, match="lock lost"):
            store.run_exclusive(lambda: None)


class TestMemoryStore:
    def test_satisfies_protocol(self, store: MemoryStore) -> None:
        assert isinstance(store, WorkflowStore)

    def test_roundtrip(self, store: MemoryStore) -> None:
        assert store.load_fingerprint() is None
        assert store.load_steps() == []

        store.save_fingerprint("approve:notify")
        store.save_steps(STEPS)

        assert store.load_fingerprint() == "approve:notify"
        assert store.load_steps() == STEPS

    def test_factory_shares_records_by_id(self, store_factory: MemoryStoreFactory) -> None:
        store_factory.open("a").save_fingerprint("x:")

        assert store_factory.open("a").load_fingerprint() == "x:"
        assert store_factory.open("b").load_fingerprint() is None

    def test_factory_rejects_unsafe_ids(self, store_factory: MemoryStoreFactory) -> None:
        with pytest.raises(ValueError):
            store_factory.open("../etc")


class TestFileStore:
    def test_missing_file_is_empty(self, temp_state_dir: Path) -> None:
        store = FileStore(temp_state_dir, "wf-1")

        assert store.load_fingerprint() is None
        assert store.load_steps() == []

    def test_roundtrip(self, temp_state_dir: Path) -> None:
        store = FileStore(temp_state_dir, "wf-1")
        store.save_fingerprint("approve:finish!")
        store.save_steps(STEPS)

        reopened = FileStoreFactory(temp_state_dir).open("wf-1")
        assert reopened.load_fingerprint() == "approve:finish!"
        assert reopened.load_steps() == STEPS

        raw = json.loads((temp_state_dir / "wf-1.json").read_text(encoding="utf-8"))
        assert raw["fingerprint"] == "approve:finish!"
        assert raw["steps"][0] == {"kind": "Entry Point", "detail": "approve"}

    def test_corrupt_file_raises_store_error(self, temp_state_dir: Path) -> None:
        (temp_state_dir / "wf-1.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError):
            FileStore(temp_state_dir, "wf-1").load_fingerprint()

    def test_stores_for_same_file_share_lock(self, temp_state_dir: Path) -> None:
        a = FileStore(temp_state_dir, "wf-1")
        b = FileStore(temp_state_dir, "wf-1")

        assert a._lock is b._lock

    @pytest.mark.parametrize("workflow_id", ["../escape", "a/b", "", ".."])
    def test_rejects_unsafe_ids(self, temp_state_dir: Path, workflow_id: str) -> None:
        with pytest.raises(ValueError):
            FileStore(temp_state_dir, workflow_id)

    def test_workflow_resumes_from_file(self, temp_state_dir: Path) -> None:
        sent: list[str] = []
        factory = FileStoreFactory(temp_state_dir)

        Onboarding(factory.open("carol"), age=21, sent=sent)
        Onboarding(factory.open("carol"), age=21, sent=sent).enter("documents_received")
        resumed = Onboarding(factory.open("carol"), age=21, valid=True, sent=sent)

        assert sent == ["welcome", "resubmit"]
        assert resumed.finished is True
        assert factory.open("carol").load_steps() == list(resumed.steps)


class TestCreateStoreFactory:
    def test_memory_backend(self) -> None:
        config = DecisionTreeConfig(store=StoreConfig(backend="memory"))
        assert isinstance(create_store_factory(config), MemoryStoreFactory)

    def test_file_backend(self, tmp_path: Path) -> None:
        config = DecisionTreeConfig(store=StoreConfig(backend="file", storage_path=tmp_path))
        factory = create_store_factory(config)

        assert isinstance(factory, FileStoreFactory)
        assert factory.root == tmp_path
