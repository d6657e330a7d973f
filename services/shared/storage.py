"""Record stores shared by the voter and todo services."""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, Type, TypeVar

import redis

from .errors import AlreadyExistsError, NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore(ABC, Generic[T]):
    """
    Keyed collection of records addressed by their integer ``id``.

    Records must expose ``id``, ``to_json()`` and a ``from_json()``
    classmethod.
    """

    @abstractmethod
    def get_all(self) -> List[T]:
        """Return every stored record, in no particular order."""

    @abstractmethod
    def add(self, record: T) -> None:
        """Store a new record, raising AlreadyExistsError if the id is taken."""

    @abstractmethod
    def get(self, record_id: int) -> T:
        """Return the record for ``record_id``, raising NotFoundError if absent."""

    @abstractmethod
    def update(self, record: T) -> None:
        """Replace an existing record, raising NotFoundError if absent."""

    @abstractmethod
    def delete(self, record_id: int) -> None:
        """Remove a record, raising NotFoundError if absent."""

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every record. Safe to call on an empty store."""

    def check_health(self) -> bool:
        return True

    def close(self) -> None:
        pass


class InMemoryStore(RecordStore[T]):
    """Process-local store backed by a dict. Not thread safe."""

    def __init__(self):
        self._records: Dict[int, T] = {}

    def get_all(self) -> List[T]:
        return [copy.deepcopy(record) for record in self._records.values()]

    def add(self, record: T) -> None:
        if record.id in self._records:
            raise AlreadyExistsError(f"Record with id {record.id} already exists")
        self._records[record.id] = copy.deepcopy(record)

    def get(self, record_id: int) -> T:
        try:
            return copy.deepcopy(self._records[record_id])
        except KeyError:
            raise NotFoundError(f"No record for id {record_id}") from None

    def update(self, record: T) -> None:
        if record.id not in self._records:
            raise NotFoundError(f"Record with id {record.id} does not exist")
        self._records[record.id] = copy.deepcopy(record)

    def delete(self, record_id: int) -> None:
        if self._records.pop(record_id, None) is None:
            raise NotFoundError(f"No record for id {record_id}")

    def delete_all(self) -> None:
        self._records = {}


class RedisStore(RecordStore[T]):
    """
    Store keeping one JSON document per record in Redis.

    Keys are ``<key_prefix><id>``. Creation and replacement use
    ``SET NX`` / ``SET XX`` so the existence check and the write happen
    in one command.
    """

    def __init__(
        self,
        record_type: Type[T],
        client: redis.Redis,
        key_prefix: str = "voter:",
        scan_count: int = 500,
    ):
        self.record_type = record_type
        self.client = client
        self.key_prefix = key_prefix
        self.scan_count = scan_count

    @classmethod
    def from_url(
        cls,
        record_type: Type[T],
        url: str,
        key_prefix: str = "voter:",
        max_connections: int = 50,
    ) -> "RedisStore[T]":
        """Connect to Redis at ``url`` and verify the connection."""
        pool = redis.ConnectionPool.from_url(
            url,
            max_connections=max_connections,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
            health_check_interval=30,
        )
        store = cls(record_type, redis.Redis(connection_pool=pool), key_prefix)
        store._test_connection()
        return store

    def _test_connection(self):
        """Test Redis connection on initialization."""
        try:
            self.client.ping()
            logger.info("Redis connection established successfully")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    def key_for(self, record_id: int) -> str:
        return f"{self.key_prefix}{record_id}"

    def _keys(self) -> List[str]:
        return list(self.client.scan_iter(match=f"{self.key_prefix}*", count=self.scan_count))

    def _load(self, raw: Optional[str]) -> Optional[T]:
        if raw is None:
            return None
        return self.record_type.from_json(raw)

    def get_all(self) -> List[T]:
        try:
            keys = self._keys()
            if not keys:
                return []
            # Keys may vanish between SCAN and MGET
            records = [self._load(raw) for raw in self.client.mget(keys)]
            return [record for record in records if record is not None]
        except redis.RedisError as e:
            logger.error(f"Redis error listing records: {e}")
            raise

    def add(self, record: T) -> None:
        key = self.key_for(record.id)
        try:
            created = self.client.set(key, record.to_json(), nx=True)
        except redis.RedisError as e:
            logger.error(f"Redis error adding {key}: {e}")
            raise
        if not created:
            logger.warning(f"Record {key} already exists")
            raise AlreadyExistsError(f"Record with id {record.id} already exists")
        logger.info(f"Added {key}")

    def get(self, record_id: int) -> T:
        key = self.key_for(record_id)
        try:
            record = self._load(self.client.get(key))
        except redis.RedisError as e:
            logger.error(f"Redis error getting {key}: {e}")
            raise
        if record is None:
            raise NotFoundError(f"No record for id {record_id}")
        logger.debug(f"Retrieved {key}")
        return record

    def update(self, record: T) -> None:
        key = self.key_for(record.id)
        try:
            replaced = self.client.set(key, record.to_json(), xx=True)
        except redis.RedisError as e:
            logger.error(f"Redis error updating {key}: {e}")
            raise
        if not replaced:
            raise NotFoundError(f"Record with id {record.id} does not exist")
        logger.info(f"Updated {key}")

    def delete(self, record_id: int) -> None:
        key = self.key_for(record_id)
        try:
            deleted = self.client.delete(key)
        except redis.RedisError as e:
            logger.error(f"Redis error deleting {key}: {e}")
            raise
        if not deleted:
            raise NotFoundError(f"No record for id {record_id}")
        logger.info(f"Deleted {key}")

    def delete_all(self) -> None:
        try:
            keys = self._keys()
            if keys:
                self.client.delete(*keys)
            logger.info(f"Deleted {len(keys)} records under {self.key_prefix}*")
        except redis.RedisError as e:
            logger.error(f"Redis error clearing records: {e}")
            raise

    def check_health(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis health check error: {e}")
            return False

    def close(self) -> None:
        """Close Redis connection pool."""
        try:
            self.client.connection_pool.disconnect()
            logger.info("Redis connection pool closed")
        except redis.RedisError as e:
            logger.error(f"Error closing Redis connection: {e}")


def create_store(
    record_type: Type[T],
    backend: str = "memory",
    redis_url: Optional[str] = None,
    key_prefix: str = "voter:",
    max_connections: int = 50,
) -> RecordStore[T]:
    """
    Build the store selected by ``backend``.

    Args:
        record_type: Record class stored, used to decode Redis documents
        backend: "memory" or "redis"
        redis_url: Connection URL, required for the redis backend
        key_prefix: Redis key prefix for this record type
        max_connections: Redis connection pool size

    Returns:
        RecordStore: The configured store
    """
    if backend == "memory":
        logger.info(f"Using in-memory store for {record_type.__name__}")
        return InMemoryStore()
    if backend == "redis":
        if not redis_url:
            raise ValueError("redis_url is required for the redis backend")
        logger.info(f"Using Redis store for {record_type.__name__} with prefix {key_prefix}")
        return RedisStore.from_url(record_type, redis_url, key_prefix, max_connections)
    raise ValueError(f"Unknown store backend: {backend}")
