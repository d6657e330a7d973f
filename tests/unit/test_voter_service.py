"""Tests for VoterService, the operation layer behind the Voter API."""

import pytest

from services.shared.errors import AlreadyExistsError, NotFoundError, RecordValidationError
from services.shared.models import ValidationFailure
from services.shared.storage import InMemoryStore
from services.voter_api.service import VoterService


@pytest.fixture
def service():
    return VoterService(InMemoryStore())


class TestVoterOperations:
    """Tests for whole-voter operations."""

    def test_create_then_read(self, service, make_voter):
        voter = make_voter(1, polls=[0, 1])
        service.create_voter(voter)

        assert service.read_voter(1) == voter

    def test_create_twice(self, service, make_voter):
        service.create_voter(make_voter(1))

        with pytest.raises(AlreadyExistsError):
            service.create_voter(make_voter(1))

    def test_create_with_duplicate_polls(self, service, make_voter, make_vote):
        voter = make_voter(4, polls=[0])
        voter.voter_history.append(make_vote(4, 0))

        with pytest.raises(RecordValidationError) as exc_info:
            service.create_voter(voter)

        assert exc_info.value.failure == ValidationFailure.DUPLICATE_VOTE
        assert service.list_voters() == []

    def test_create_with_foreign_vote(self, service, make_voter, make_vote):
        voter = make_voter(4)
        voter.voter_history.append(make_vote(1, 0))

        with pytest.raises(RecordValidationError) as exc_info:
            service.create_voter(voter)

        assert exc_info.value.failure == ValidationFailure.VOTER_MISMATCH

    def test_replace(self, service, make_voter):
        service.create_voter(make_voter(1))
        changed = make_voter(1, polls=[2])
        changed.email = "new@example.com"

        service.replace_voter(1, changed)

        assert service.read_voter(1) == changed

    def test_replace_missing(self, service, make_voter):
        with pytest.raises(NotFoundError):
            service.replace_voter(4, make_voter(4))

    def test_replace_with_mismatched_id(self, service, make_voter):
        service.create_voter(make_voter(1))

        with pytest.raises(RecordValidationError):
            service.replace_voter(1, make_voter(4))

    def test_replace_with_invalid_history(self, service, make_voter, make_vote):
        service.create_voter(make_voter(0))
        changed = make_voter(0)
        changed.voter_history.append(make_vote(3, 0))

        with pytest.raises(RecordValidationError):
            service.replace_voter(0, changed)

        assert service.read_voter(0).voter_history == []

    def test_delete_then_read(self, service, make_voter):
        service.create_voter(make_voter(2))
        service.delete_voter(2)

        with pytest.raises(NotFoundError):
            service.read_voter(2)

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            service.delete_voter(4)

    def test_clear_then_list(self, service, make_voter):
        for voter_id in range(3):
            service.create_voter(make_voter(voter_id))

        service.clear_voters()

        assert service.list_voters() == []


class TestVoteOperations:
    """Tests for operations on a single vote within a voter's history."""

    def test_worked_example(self, service, make_voter, make_vote):
        """Voter 1 with no history: add poll 0, reject it again, delete it."""
        service.create_voter(make_voter(1))

        service.create_vote(1, make_vote(1, 0))
        assert [vote.poll_id for vote in service.list_votes(1)] == [0]

        with pytest.raises(AlreadyExistsError):
            service.create_vote(1, make_vote(1, 0))

        service.delete_vote(1, 0)
        assert service.read_voter(1).voter_history == []

    def test_create_vote_for_missing_voter(self, service, make_vote):
        with pytest.raises(NotFoundError):
            service.create_vote(4, make_vote(4, 0))

    def test_create_vote_for_other_voter(self, service, make_voter, make_vote):
        service.create_voter(make_voter(0))

        with pytest.raises(RecordValidationError) as exc_info:
            service.create_vote(0, make_vote(1, 0))

        assert exc_info.value.failure == ValidationFailure.VOTER_MISMATCH

    def test_read_vote(self, service, make_voter):
        service.create_voter(make_voter(1, polls=[0, 1, 2]))
        assert service.read_vote(1, 2).poll_id == 2

    def test_read_missing_vote(self, service, make_voter):
        service.create_voter(make_voter(1, polls=[0]))

        with pytest.raises(NotFoundError):
            service.read_vote(1, 4)

    def test_replace_vote(self, service, make_voter, make_vote):
        service.create_voter(make_voter(1, polls=[0, 1]))
        changed = make_vote(1, 1, day=15)

        service.replace_vote(1, 1, changed)

        assert service.read_vote(1, 1) == changed

    def test_replace_missing_vote(self, service, make_voter, make_vote):
        service.create_voter(make_voter(1, polls=[0]))

        with pytest.raises(NotFoundError):
            service.replace_vote(1, 4, make_vote(1, 4))

    def test_replace_vote_with_other_poll(self, service, make_voter, make_vote):
        service.create_voter(make_voter(1, polls=[0]))

        with pytest.raises(RecordValidationError) as exc_info:
            service.replace_vote(1, 0, make_vote(1, 2))

        assert exc_info.value.failure is None

    def test_replace_vote_with_other_voter(self, service, make_voter, make_vote):
        service.create_voter(make_voter(1, polls=[0]))

        with pytest.raises(RecordValidationError) as exc_info:
            service.replace_vote(1, 0, make_vote(2, 0))

        assert exc_info.value.failure == ValidationFailure.VOTER_MISMATCH

    def test_delete_missing_vote(self, service, make_voter):
        service.create_voter(make_voter(1, polls=[0]))

        with pytest.raises(NotFoundError):
            service.delete_vote(1, 4)

    def test_delete_vote_on_missing_voter(self, service):
        with pytest.raises(NotFoundError):
            service.delete_vote(4, 2)
