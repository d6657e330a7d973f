"""Voter and vote operations over a record store."""

import logging
from typing import List

from ..shared.errors import NotFoundError, RecordValidationError
from ..shared.models import ValidationFailure, Voter, VoteRecord
from ..shared.storage import RecordStore

logger = logging.getLogger(__name__)


class VoterService:
    """
    Operations exposed by the Voter API.

    Vote operations fetch the owning voter, apply the change to a copy and
    write the whole voter back. That read-modify-write is not atomic, so
    concurrent writers to the same voter are last-write-wins.
    """

    def __init__(self, store: RecordStore[Voter]):
        self.store = store

    def _ensure_valid(self, voter: Voter) -> None:
        is_valid, failure = voter.validate()
        if not is_valid:
            logger.warning(f"Voter {voter.voter_id} failed validation: {failure.value}")
            raise RecordValidationError(
                f"Voter {voter.voter_id} has an invalid vote history: {failure.value}",
                failure=failure,
            )

    def _get_voter(self, voter_id: int) -> Voter:
        try:
            return self.store.get(voter_id)
        except NotFoundError:
            logger.info(f"Voter {voter_id} not found")
            raise NotFoundError(f"Voter {voter_id} not found") from None

    def list_voters(self) -> List[Voter]:
        return self.store.get_all()

    def create_voter(self, voter: Voter) -> Voter:
        self._ensure_valid(voter)
        self.store.add(voter)
        logger.info(f"Voter {voter.voter_id} created")
        return voter

    def read_voter(self, voter_id: int) -> Voter:
        return self._get_voter(voter_id)

    def replace_voter(self, voter_id: int, voter: Voter) -> Voter:
        if voter.voter_id != voter_id:
            raise RecordValidationError(
                f"Voter id {voter.voter_id} does not match path id {voter_id}"
            )
        self._ensure_valid(voter)
        try:
            self.store.update(voter)
        except NotFoundError:
            raise NotFoundError(f"Voter {voter_id} not found") from None
        logger.info(f"Voter {voter_id} replaced")
        return voter

    def delete_voter(self, voter_id: int) -> None:
        try:
            self.store.delete(voter_id)
        except NotFoundError:
            raise NotFoundError(f"Voter {voter_id} not found") from None
        logger.info(f"Voter {voter_id} deleted")

    def clear_voters(self) -> None:
        self.store.delete_all()
        logger.info("All voters deleted")

    def list_votes(self, voter_id: int) -> List[VoteRecord]:
        return self._get_voter(voter_id).voter_history

    def read_vote(self, voter_id: int, poll_id: int) -> VoteRecord:
        return self._get_voter(voter_id).get_vote(poll_id)

    def create_vote(self, voter_id: int, vote: VoteRecord) -> VoteRecord:
        voter = self._get_voter(voter_id)
        if vote.voter_id != voter.voter_id:
            raise RecordValidationError(
                f"Vote voter_id {vote.voter_id} does not match voter {voter_id}",
                failure=ValidationFailure.VOTER_MISMATCH,
            )
        self.store.update(voter.add_vote(vote))
        logger.info(f"Vote for poll {vote.poll_id} added to voter {voter_id}")
        return vote

    def replace_vote(self, voter_id: int, poll_id: int, vote: VoteRecord) -> VoteRecord:
        voter = self._get_voter(voter_id)
        if vote.poll_id != poll_id:
            raise RecordValidationError(
                f"Vote poll_id {vote.poll_id} does not match path poll {poll_id}"
            )
        if vote.voter_id != voter.voter_id:
            raise RecordValidationError(
                f"Vote voter_id {vote.voter_id} does not match voter {voter_id}",
                failure=ValidationFailure.VOTER_MISMATCH,
            )
        self.store.update(voter.update_vote(vote))
        logger.info(f"Vote for poll {poll_id} replaced on voter {voter_id}")
        return vote

    def delete_vote(self, voter_id: int, poll_id: int) -> None:
        voter = self._get_voter(voter_id)
        self.store.update(voter.delete_vote(poll_id))
        logger.info(f"Vote for poll {poll_id} deleted from voter {voter_id}")
