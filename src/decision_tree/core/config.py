"""Core configuration for decision-tree workflows."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from decision_tree.logging import configure_logging


class StoreConfig(BaseSettings):
    """Configuration for the workflow store backend."""

    backend: Literal["memory", "file", "redis"] = Field(
        default="file",
        description="Store backend holding workflow fingerprints and step logs",
    )
    storage_path: Path = Field(
        default=Path(".workflows"),
        description="Directory used by the file backend",
    )

    model_config = SettingsConfigDict(
        env_prefix="DECISION_TREE_STORE_",
        env_file=".env",
        extra="ignore",
    )


class RedisConfig(BaseSettings):
    """Configuration for the redis store backend."""

    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, gt=0, description="Redis port")
    db: int = Field(default=0, ge=0, description="Redis database number")
    key_prefix: str = Field(
        default="decision_tree",
        description="Prefix for every key written by the store",
    )
    lock_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before an abandoned workflow lock expires",
    )
    blocking_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for a workflow lock before giving up",
    )

    model_config = SettingsConfigDict(
        env_prefix="DECISION_TREE_REDIS_",
        env_file=".env",
        extra="ignore",
    )


class DecisionTreeConfig(BaseSettings):
    """Main configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    json_logs: bool = Field(
        default=True,
        description="Emit structured JSON logs instead of plain text",
    )
    workflows: str = Field(
        default="",
        description="Comma-separated 'package.module:ClassName' workflows to register",
    )

    store: StoreConfig = Field(
        default_factory=StoreConfig,
        description="Store configuration",
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig,
        description="Redis configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="DECISION_TREE_",
        env_file=".env",
        extra="ignore",
    )

    def workflow_paths(self) -> list[str]:
        return [p.strip() for p in self.workflows.split(",") if p.strip()]

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        if self.json_logs:
            configure_logging(self.log_level)
        else:
            level = getattr(logging, self.log_level.upper(), logging.INFO)
            logging.basicConfig(
                level=level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        if self.debug:
            logging.getLogger("decision_tree").setLevel(logging.DEBUG)
