"""Test configuration and fixtures."""

import os
from pathlib import Path

import pytest

from decision_tree.core.config import DecisionTreeConfig, RedisConfig, StoreConfig
from decision_tree.stores import MemoryStore, MemoryStoreFactory


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's .env and DECISION_TREE_* variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("DECISION_TREE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def store() -> MemoryStore:
    """Provide an empty in-memory store for one workflow identity."""
    return MemoryStore("wf-1")


@pytest.fixture
def store_factory() -> MemoryStoreFactory:
    """Provide a memory store factory shared across instantiations."""
    return MemoryStoreFactory()


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Provide a temporary state directory."""
    state_dir = tmp_path / ".workflows"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def store_config(temp_state_dir: Path) -> StoreConfig:
    """Provide a test file store configuration."""
    return StoreConfig(backend="file", storage_path=temp_state_dir)


@pytest.fixture
def config(store_config: StoreConfig) -> DecisionTreeConfig:
    """Provide a test configuration."""
    return DecisionTreeConfig(
        log_level="DEBUG",
        debug=True,
        json_logs=True,
        store=store_config,
        redis=RedisConfig(),
    )
