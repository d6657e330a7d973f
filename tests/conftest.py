"""Pytest fixtures shared by the unit and integration tests.

Fixtures build voters, votes and todo items, and FastAPI test clients
wired to an in-memory store.
"""

from datetime import datetime, timezone
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from services.shared.models import ToDoItem, Voter, VoteRecord
from services.shared.storage import InMemoryStore
from services.todo_api.main import create_app as create_todo_app
from services.voter_api.main import create_app as create_voter_app


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "redis: mark test as requiring a running Redis server"
    )


@pytest.fixture
def make_vote() -> Callable[..., VoteRecord]:
    """Factory for vote records with a fixed, timezone-aware date."""
    def _make(voter_id: int, poll_id: int, day: int = 1) -> VoteRecord:
        return VoteRecord(
            poll_id=poll_id,
            voter_id=voter_id,
            vote_date=datetime(2024, 1, day, 12, 0, tzinfo=timezone.utc)
        )
    return _make


@pytest.fixture
def make_voter(make_vote) -> Callable[..., Voter]:
    """Factory for voters, optionally with a history for the given polls."""
    def _make(voter_id: int, polls=()) -> Voter:
        return Voter(
            voter_id=voter_id,
            name=f"Voter {voter_id}",
            email=f"voter{voter_id}@example.com",
            voter_history=[make_vote(voter_id, poll_id) for poll_id in polls]
        )
    return _make


@pytest.fixture
def voter_payload() -> Callable[..., dict]:
    """Factory for voter JSON bodies."""
    def _payload(voter_id: int, polls=(), owner=None) -> dict:
        return {
            "voter_id": voter_id,
            "name": f"Voter {voter_id}",
            "email": f"voter{voter_id}@example.com",
            "voter_history": [
                vote_payload_for(voter_id if owner is None else owner, poll_id)
                for poll_id in polls
            ]
        }
    return _payload


def vote_payload_for(voter_id: int, poll_id: int, vote_date: str = "2024-01-01T12:00:00Z") -> dict:
    return {"poll_id": poll_id, "voter_id": voter_id, "vote_date": vote_date}


@pytest.fixture
def vote_payload() -> Callable[..., dict]:
    """Factory for vote JSON bodies."""
    return vote_payload_for


@pytest.fixture
def voter_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def voter_client(voter_store) -> Generator[TestClient, None, None]:
    """Test client for the Voter API backed by an in-memory store."""
    with TestClient(create_voter_app(store=voter_store)) as client:
        yield client


@pytest.fixture
def todo_client() -> Generator[TestClient, None, None]:
    """Test client for the Todo API, preloaded with four items."""
    store = InMemoryStore()
    for item_id, title in enumerate(
        ["Learn Python", "Learn FastAPI", "Learn Redis", "Write tests"], start=1
    ):
        store.add(ToDoItem(id=item_id, title=title))
    with TestClient(create_todo_app(store=store)) as client:
        yield client
