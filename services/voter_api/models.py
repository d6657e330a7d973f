"""Pydantic models for request/response validation."""
from datetime import datetime
from typing import Dict, List, Literal
from pydantic import BaseModel, Field

from ..shared.models import Voter, VoteRecord


class VoteRecordModel(BaseModel):
    """One entry of a voter's poll history."""

    poll_id: int = Field(..., ge=0, description="Poll identifier, unique per voter")
    voter_id: int = Field(..., ge=0, description="Identifier of the owning voter")
    vote_date: datetime = Field(..., description="When the vote was cast")

    class Config:
        json_schema_extra = {
            "example": {
                "poll_id": 1,
                "voter_id": 7,
                "vote_date": "2024-01-15T10:30:00Z"
            }
        }

    def to_record(self) -> VoteRecord:
        return VoteRecord(
            poll_id=self.poll_id,
            voter_id=self.voter_id,
            vote_date=self.vote_date,
        )

    @classmethod
    def from_record(cls, vote: VoteRecord) -> "VoteRecordModel":
        return cls(poll_id=vote.poll_id, voter_id=vote.voter_id, vote_date=vote.vote_date)


class VoterModel(BaseModel):
    """Voter request and response model."""

    voter_id: int = Field(..., ge=0, description="Unique voter identifier, assigned by the client")
    name: str = Field(default="", description="Voter name")
    email: str = Field(default="", description="Voter email address")
    voter_history: List[VoteRecordModel] = Field(default_factory=list, description="Poll participation history")

    class Config:
        json_schema_extra = {
            "example": {
                "voter_id": 7,
                "name": "Jane Doe",
                "email": "jane@example.com",
                "voter_history": [
                    {"poll_id": 1, "voter_id": 7, "vote_date": "2024-01-15T10:30:00Z"}
                ]
            }
        }

    def to_voter(self) -> Voter:
        return Voter(
            voter_id=self.voter_id,
            name=self.name,
            email=self.email,
            voter_history=[vote.to_record() for vote in self.voter_history],
        )

    @classmethod
    def from_voter(cls, voter: Voter) -> "VoterModel":
        return cls(
            voter_id=voter.voter_id,
            name=voter.name,
            email=voter.email,
            voter_history=[VoteRecordModel.from_record(vote) for vote in voter.voter_history],
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement, returned by delete endpoints."""

    message: str = Field(..., description="Response message")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: Literal["ok", "unhealthy"] = Field(..., description="Overall health status")
    version: str = Field(..., description="Service version")
    uptime: float = Field(..., description="Seconds since the service started")
    total_calls: int = Field(..., description="Requests handled under the voter routes")
    errors_encountered: Dict[str, int] = Field(default_factory=dict, description="Error responses by status code")
    services: dict = Field(..., description="Status of backing services")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "ok",
                "version": "1.0.0",
                "uptime": 3600.5,
                "total_calls": 42,
                "errors_encountered": {"404": 3},
                "services": {"store": "connected"},
                "timestamp": "2024-01-15T10:30:00"
            }
        }


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str = Field(..., description="Error message")

    class Config:
        json_schema_extra = {
            "example": {
                "detail": "Voter 7 not found"
            }
        }
