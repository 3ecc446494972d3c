"""
Per-character exclusive locks.

Provides:
- Redis locks shared by every server instance (when REDIS_URL is set)
- In-process locks when Redis is not configured or unreachable
- Circuit breaker: once Redis fails it stays disabled for this process
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator, Optional

import redis

logger = logging.getLogger(__name__)


class LockTimeoutError(RuntimeError):
    """Raised when a character lock could not be acquired in time."""


class CacheKeys:
    """Centralized Redis key naming."""

    @staticmethod
    def character_lock(character_id: int) -> str:
        return f"character:{character_id}:lock"


class CharacterLockManager:
    """
    Hands out one exclusive lock per character id.

    Engine operations hold the lock for their whole transaction so two batches
    for the same character never interleave.
    """

    def __init__(self, redis_url: Optional[str] = None, timeout: float = 10.0,
                 client: Optional[redis.Redis] = None):
        """
        Args:
            redis_url: Redis server to share locks through. None keeps locks local.
            timeout: Seconds to wait for a lock, and the Redis lock TTL.
            client: Pre-built Redis client (takes precedence over redis_url).
        """
        self.redis_url = redis_url
        self.timeout = timeout
        self._client = client
        self._pool: Optional[redis.ConnectionPool] = None
        # Circuit breaker: None=Unknown, True=Available, False=Unavailable
        self._redis_available: Optional[bool] = None if (redis_url or client) else False
        # Entries vanish once no thread holds or waits on the lock
        self._local_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._local_guard = threading.Lock()

    @property
    def uses_redis(self) -> bool:
        return bool(self._redis_available)

    def get_connection(self) -> Optional[redis.Redis]:
        """
        Get the Redis client for locking.

        Returns:
            Redis client instance, or None if Redis is unavailable
        """
        if self._redis_available is False:
            return None

        try:
            if self._client is None:
                self._pool = redis.ConnectionPool.from_url(
                    self.redis_url,
                    max_connections=50,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                    retry_on_timeout=False,
                    health_check_interval=30,
                )
                self._client = redis.Redis(connection_pool=self._pool)
                logger.info(f"Created Redis lock pool: {self.redis_url}")

            if self._redis_available is None:
                self._client.ping()
                self._redis_available = True
                logger.info("Redis connection verified, using shared character locks")
            return self._client
        except redis.exceptions.RedisError as e:
            self._redis_available = False
            logger.warning(f"Redis connection failed ({e}), falling back to local character locks")
            return None

    @contextmanager
    def lock(self, character_id: int) -> Iterator[None]:
        """
        Hold the exclusive lock for one character.

        Raises:
            LockTimeoutError: If the lock is still held by someone else after
                ``timeout`` seconds.
        """
        redis_lock = self._acquire_redis(character_id)
        if redis_lock is not None:
            try:
                yield
            finally:
                try:
                    redis_lock.release()
                except redis.exceptions.LockError as e:
                    # TTL ran out before release; the transaction already finished
                    logger.warning(f"Character {character_id} lock expired before release: {e}")
            return

        local_lock = self._local_lock(character_id)
        if not local_lock.acquire(timeout=self.timeout):
            raise LockTimeoutError(f"Timed out waiting for character {character_id}")
        try:
            yield
        finally:
            local_lock.release()

    def close(self) -> None:
        """Release pooled Redis connections."""
        if self._pool is not None:
            self._pool.disconnect()
            self._pool = None

    def _acquire_redis(self, character_id: int):
        client = self.get_connection()
        if client is None:
            return None
        redis_lock = client.lock(
            CacheKeys.character_lock(character_id),
            timeout=self.timeout,
            blocking_timeout=self.timeout,
        )
        try:
            acquired = redis_lock.acquire()
        except redis.exceptions.ConnectionError as e:
            self._redis_available = False
            logger.warning(f"Redis lock failed ({e}), falling back to local character locks")
            return None
        if not acquired:
            raise LockTimeoutError(f"Timed out waiting for character {character_id}")
        return redis_lock

    def _local_lock(self, character_id: int) -> threading.Lock:
        with self._local_guard:
            local_lock = self._local_locks.get(character_id)
            if local_lock is None:
                local_lock = threading.Lock()
                self._local_locks[character_id] = local_lock
            return local_lock
