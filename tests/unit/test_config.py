"""Unit tests for configuration."""

from pathlib import Path

import pytest

from decision_tree.core.config import DecisionTreeConfig, RedisConfig, StoreConfig


def test_store_config_defaults() -> None:
    """Test store config default values."""
    config = StoreConfig()

    assert config.backend == "file"
    assert config.storage_path == Path(".workflows")


def test_redis_config_defaults() -> None:
    """Test redis config default values."""
    config = RedisConfig()

    assert config.host == "localhost"
    assert config.port == 6379
    assert config.key_prefix == "decision_tree"
    assert config.lock_timeout == 30.0
    assert config.blocking_timeout == 10.0


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test grouped env prefixes."""
    monkeypatch.setenv("DECISION_TREE_STORE_BACKEND", "redis")
    monkeypatch.setenv("DECISION_TREE_REDIS_PORT", "6380")
    monkeypatch.setenv("DECISION_TREE_LOG_LEVEL", "DEBUG")

    config = DecisionTreeConfig()

    assert config.store.backend == "redis"
    assert config.redis.port == 6380
    assert config.log_level == "DEBUG"


def test_invalid_backend_is_rejected() -> None:
    with pytest.raises(ValueError):
        StoreConfig(backend="sqlite")  # type: ignore[arg-type]


def test_config_composition() -> None:
    """Test config with nested configs."""
    config = DecisionTreeConfig(
        log_level="DEBUG",
        debug=True,
        workflows=" pkg.flows:Onboarding, ,pkg.flows:Refund ",
    )

    assert config.debug is True
    assert isinstance(config.store, StoreConfig)
    assert isinstance(config.redis, RedisConfig)
    assert config.workflow_paths() == ["pkg.flows:Onboarding", "pkg.flows:Refund"]
