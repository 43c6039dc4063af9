"""Core package initialization."""

from decision_tree.core.config import DecisionTreeConfig, RedisConfig, StoreConfig

__all__ = [
    "DecisionTreeConfig",
    "RedisConfig",
    "StoreConfig",
]
