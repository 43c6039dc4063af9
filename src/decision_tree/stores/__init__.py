"""Pluggable workflow store backends behind the WorkflowStore protocol."""

from __future__ import annotations

from decision_tree.core.config import DecisionTreeConfig
from decision_tree.stores.errors import StoreError, StoreLockTimeout
from decision_tree.stores.file_backend import FileStore, FileStoreFactory
from decision_tree.stores.memory_backend import MemoryStore, MemoryStoreFactory
from decision_tree.stores.protocols import StoreFactory, WorkflowStore


def create_store_factory(config: DecisionTreeConfig | None = None) -> StoreFactory:
    """Create the store factory selected by the application settings."""
    if config is None:
        config = DecisionTreeConfig()

    if config.store.backend == "memory":
        return MemoryStoreFactory()
    if config.store.backend == "redis":
        from decision_tree.stores.redis_backend import RedisStoreFactory

        return RedisStoreFactory.from_config(config.redis)
    return FileStoreFactory(config.store.storage_path)


__all__ = [
    "FileStore",
    "FileStoreFactory",
    "MemoryStore",
    "MemoryStoreFactory",
    "StoreError",
    "StoreFactory",
    "StoreLockTimeout",
    "WorkflowStore",
    "create_store_factory",
]
