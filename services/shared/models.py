"""
Shared data models for the voter and todo services.

This module contains:
- VoteRecord: one poll-participation entry in a voter's history
- Voter: a voter profile with its ordered vote history
- Validation of a voter's history
- Vote-scoped transforms that return an updated copy of a Voter
"""

import json
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

from .errors import AlreadyExistsError, NotFoundError


class ValidationFailure(str, Enum):
    """Reasons a voter's history can fail validation."""
    DUPLICATE_VOTE = "duplicate_vote"
    VOTER_MISMATCH = "voter_mismatch"


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    # fromisoformat does not accept a trailing Z before 3.11
    if isinstance(value, str) and value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass
class VoteRecord:
    """
    One poll participation entry.

    Attributes:
        poll_id: Poll identifier, unique within one voter's history
        voter_id: Identifier of the owning voter
        vote_date: When the vote was cast
    """
    poll_id: int
    voter_id: int
    vote_date: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "poll_id": self.poll_id,
            "voter_id": self.voter_id,
            "vote_date": self.vote_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VoteRecord':
        """Create VoteRecord from dictionary."""
        return cls(
            poll_id=int(data["poll_id"]),
            voter_id=int(data["voter_id"]),
            vote_date=_parse_datetime(data["vote_date"]),
        )


@dataclass
class Voter:
    """
    A voter and the history of polls they took part in.

    Attributes:
        voter_id: Unique identifier, assigned by the client
        name: Free-form display name
        email: Free-form contact address
        voter_history: Ordered vote records belonging to this voter
    """
    voter_id: int
    name: str = ""
    email: str = ""
    voter_history: List[VoteRecord] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.voter_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["voter_history"] = [vote.to_dict() for vote in self.voter_history]
        return data

    def to_json(self) -> str:
        """Convert to JSON string for the document store."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Voter':
        """Create Voter from dictionary."""
        return cls(
            voter_id=int(data["voter_id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            voter_history=[
                VoteRecord.from_dict(vote)
                for vote in data.get("voter_history") or []
            ],
        )

    @classmethod
    def from_json(cls, json_str: str) -> 'Voter':
        """Create Voter from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def validate(self) -> tuple[bool, Optional[ValidationFailure]]:
        """
        Validate the vote history.

        Records are scanned in order. The second occurrence of a poll_id
        fails with DUPLICATE_VOTE, a record owned by another voter fails
        with VOTER_MISMATCH.

        Returns:
            tuple: (is_valid, failure)
        """
        seen = set()
        for vote in self.voter_history:
            if vote.poll_id in seen:
                return False, ValidationFailure.DUPLICATE_VOTE
            seen.add(vote.poll_id)
            if vote.voter_id != self.voter_id:
                return False, ValidationFailure.VOTER_MISMATCH
        return True, None

    def _vote_index(self, poll_id: int) -> Optional[int]:
        for index, vote in enumerate(self.voter_history):
            if vote.poll_id == poll_id:
                return index
        return None

    def get_vote(self, poll_id: int) -> VoteRecord:
        """Return the vote for ``poll_id``, raising NotFoundError if absent."""
        index = self._vote_index(poll_id)
        if index is None:
            raise NotFoundError(f"Vote for poll {poll_id} does not exist")
        return self.voter_history[index]

    def add_vote(self, vote: VoteRecord) -> 'Voter':
        """Return a copy of this voter with ``vote`` appended to the history."""
        if self._vote_index(vote.poll_id) is not None:
            raise AlreadyExistsError(f"Vote for poll {vote.poll_id} already exists")
        return replace(self, voter_history=self.voter_history + [vote])

    def update_vote(self, vote: VoteRecord) -> 'Voter':
        """Return a copy of this voter with the matching vote replaced."""
        index = self._vote_index(vote.poll_id)
        if index is None:
            raise NotFoundError(f"Vote for poll {vote.poll_id} does not exist")
        history = list(self.voter_history)
        history[index] = vote
        return replace(self, voter_history=history)

    def delete_vote(self, poll_id: int) -> 'Voter':
        """Return a copy of this voter without the vote for ``poll_id``."""
        index = self._vote_index(poll_id)
        if index is None:
            raise NotFoundError(f"Vote for poll {poll_id} does not exist")
        history = self.voter_history[:index] + self.voter_history[index + 1:]
        return replace(self, voter_history=history)


@dataclass
class ToDoItem:
    """
    A todo list entry.

    Attributes:
        id: Unique identifier, assigned by the client
        title: What needs doing
        is_done: Completion flag
    """
    id: int
    title: str = ""
    is_done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert to JSON string for the document store."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ToDoItem':
        """Create ToDoItem from dictionary."""
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            is_done=bool(data.get("is_done", False)),
        )

    @classmethod
    def from_json(cls, json_str: str) -> 'ToDoItem':
        """Create ToDoItem from JSON string."""
        return cls.from_dict(json.loads(json_str))
