"""Pytest fixtures for integration tests.

This module provides fixtures connecting to a live Redis server. Each
test gets stores under its own key prefix, and every key under that
prefix is removed afterwards.
"""

import os
import uuid
from typing import Generator

import pytest
import redis
from fastapi.testclient import TestClient

from services.shared.models import ToDoItem, Voter
from services.shared.storage import RedisStore
from services.voter_api.main import create_app


@pytest.fixture(scope="session")
def redis_client() -> Generator[redis.Redis, None, None]:
    """Redis client for direct database operations.

    Yields a connected Redis client for test assertions and setup.
    """
    client = redis.Redis(
        host=os.getenv("REDIS_HOST", "localhost"),
        port=int(os.getenv("REDIS_PORT", "6379")),
        db=int(os.getenv("REDIS_DB", "0")),
        decode_responses=True
    )

    # Test connection
    try:
        client.ping()
    except redis.ConnectionError:
        pytest.skip("Redis not available")

    yield client

    client.close()


@pytest.fixture
def key_prefix(redis_client: redis.Redis) -> Generator[str, None, None]:
    """Unique key prefix for one test, cleaned up afterwards."""
    prefix = f"test-{uuid.uuid4().hex[:8]}:"

    yield prefix

    keys = list(redis_client.scan_iter(match=f"{prefix}*"))
    if keys:
        redis_client.delete(*keys)


@pytest.fixture
def redis_voter_store(redis_client: redis.Redis, key_prefix: str) -> RedisStore:
    return RedisStore(Voter, redis_client, key_prefix=f"{key_prefix}voter:")


@pytest.fixture
def redis_todo_store(redis_client: redis.Redis, key_prefix: str) -> RedisStore:
    return RedisStore(ToDoItem, redis_client, key_prefix=f"{key_prefix}todo:")


@pytest.fixture
def redis_api_client(redis_voter_store: RedisStore) -> Generator[TestClient, None, None]:
    """Voter API test client backed by Redis."""
    with TestClient(create_app(store=redis_voter_store)) as client:
        yield client
