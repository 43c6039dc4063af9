"""Redis store backend.

Keys per workflow identity (with the default prefix):

    decision_tree:<workflow_id>:fingerprint   plain string
    decision_tree:<workflow_id>:steps         JSON list of steps
    decision_tree:<workflow_id>:lock          redis-py lock token

The lock gives every process talking to the same redis one exclusive unit of
work per identity.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

import redis

from decision_tree.core.config import RedisConfig
from decision_tree.stores.base import ExclusiveStore
from decision_tree.stores.errors import StoreError, StoreLockTimeout
from decision_tree.workflow.steps import Step

logger = logging.getLogger(__name__)


class RedisStore(ExclusiveStore):
    def __init__(
        self,
        client: redis.Redis,
        workflow_id: str,
        *,
        key_prefix: str = "decision_tree",
        lock_timeout: float = 30.0,
        blocking_timeout: float = 10.0,
    ) -> None:
        super().__init__(workflow_id)
        self._client = client
        self._key = f"{key_prefix}:{self.workflow_id}"
        self._blocking_timeout = blocking_timeout
        self._lock = client.lock(
            f"{self._key}:lock", timeout=lock_timeout, blocking_timeout=blocking_timeout
        )

    @property
    def fingerprint_key(self) -> str:
        return f"{self._key}:fingerprint"

    @property
    def steps_key(self) -> str:
        return f"{self._key}:steps"

    def _acquire(self) -> None:
        try:
            acquired = self._lock.acquire()
        except Exception as exc:
            raise StoreError(f"Redis lock failed for workflow={self.workflow_id!r}: {exc}") from exc
        if not acquired:
            raise StoreLockTimeout(self.workflow_id, self._blocking_timeout)

    def _release(self) -> None:
        try:
            self._lock.release()
        except Exception as exc:
            raise StoreError(
                f"Redis lock release failed for workflow={self.workflow_id!r}: {exc}"
            ) from exc

    def load_fingerprint(self) -> str | None:
        try:
            value = self._client.get(self.fingerprint_key)
        except Exception as exc:
            raise StoreError(f"Redis GET failed for key={self.fingerprint_key!r}: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def save_fingerprint(self, fingerprint: str) -> None:
        try:
            self._client.set(self.fingerprint_key, fingerprint)
        except Exception as exc:
            raise StoreError(f"Redis SET failed for key={self.fingerprint_key!r}: {exc}") from exc

    def load_steps(self) -> list[Step]:
        try:
            raw = self._client.get(self.steps_key)
        except Exception as exc:
            raise StoreError(f"Redis GET failed for key={self.steps_key!r}: {exc}") from exc
        if raw is None:
            return []
        return [Step.model_validate(item) for item in json.loads(raw)]

    def save_steps(self, steps: Sequence[Step]) -> None:
        payload = json.dumps([step.model_dump(mode="json") for step in steps], ensure_ascii=False)
        try:
            self._client.set(self.steps_key, payload)
        except Exception as exc:
            raise StoreError(f"Redis SET failed for key={self.steps_key!r}: {exc}") from exc
        logger.debug("Step log written", extra={"key": self.steps_key, "steps": len(steps)})


class RedisStoreFactory:
    def __init__(
        self,
        client: redis.Redis,
        *,
        key_prefix: str = "decision_tree",
        lock_timeout: float = 30.0,
        blocking_timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._key_prefix = key_prefix
        self._lock_timeout = lock_timeout
        self._blocking_timeout = blocking_timeout

    @classmethod
    def from_config(cls, config: RedisConfig) -> RedisStoreFactory:
        client = redis.Redis(
            host=config.host, port=config.port, db=config.db, decode_responses=True
        )
        return cls(
            client,
            key_prefix=config.key_prefix,
            lock_timeout=config.lock_timeout,
            blocking_timeout=config.blocking_timeout,
        )

    def open(self, workflow_id: str) -> RedisStore:
        return RedisStore(
            self._client,
            workflow_id,
            key_prefix=self._key_prefix,
            lock_timeout=self._lock_timeout,
            blocking_timeout=self._blocking_timeout,
        )
