"""
FastAPI application for the Voter API.

Voters are created, replaced and deleted as whole records. Each voter's
poll history is managed through the nested /polls routes.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Path, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from ..shared.http import RequestStats, install_error_handlers, install_stats_middleware
from ..shared.models import Voter
from ..shared.storage import RecordStore, create_store
from .config import Settings, settings
from .models import (
    VoterModel,
    VoteRecordModel,
    MessageResponse,
    HealthResponse,
    ErrorResponse,
)
from .service import VoterService

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Rate limiter. The limiter is process-wide, so the limit applied is the
# RATE_LIMIT of the most recently built app.
limiter = Limiter(key_func=get_remote_address)
_rate_limit = settings.RATE_LIMIT


def current_rate_limit() -> str:
    return _rate_limit


router = APIRouter(prefix="/voters", tags=["Voters"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Voter or vote not found"}}
BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid voter or vote"}}
CONFLICT = {409: {"model": ErrorResponse, "description": "Voter or vote already exists"}}


def get_service(request: Request) -> VoterService:
    return request.app.state.service


def build_store(app_settings: Settings) -> RecordStore[Voter]:
    return create_store(
        Voter,
        backend=app_settings.STORE_BACKEND,
        redis_url=app_settings.redis_url,
        key_prefix=app_settings.REDIS_KEY_PREFIX,
        max_connections=app_settings.REDIS_MAX_CONNECTIONS,
    )


@router.get("", response_model=List[VoterModel])
def list_voters(service: VoterService = Depends(get_service)):
    """List every voter. Returns an empty list when there are none."""
    return [VoterModel.from_voter(voter) for voter in service.list_voters()]


@router.post("", response_model=VoterModel, responses={**BAD_REQUEST, **CONFLICT})
@limiter.limit(current_rate_limit)
def create_voter(request: Request, voter: VoterModel, service: VoterService = Depends(get_service)):
    """
    Create a voter.

    - **voter_id**: Unique identifier, chosen by the client
    - **voter_history**: Optional initial history; poll ids must be unique
      and every vote must belong to this voter
    """
    service.create_voter(voter.to_voter())
    return voter


@router.delete("", response_model=MessageResponse)
def clear_voters(service: VoterService = Depends(get_service)):
    """Delete every voter."""
    service.clear_voters()
    return MessageResponse(message="Delete OK")


@router.get("/{voter_id}", response_model=VoterModel, responses=NOT_FOUND)
def read_voter(voter_id: int = Path(..., ge=0), service: VoterService = Depends(get_service)):
    return VoterModel.from_voter(service.read_voter(voter_id))


@router.put("/{voter_id}", response_model=VoterModel, responses={**NOT_FOUND, **BAD_REQUEST})
def replace_voter(
    voter: VoterModel,
    voter_id: int = Path(..., ge=0),
    service: VoterService = Depends(get_service)
):
    """Replace a voter, including its whole vote history."""
    service.replace_voter(voter_id, voter.to_voter())
    return voter


@router.delete("/{voter_id}", response_model=MessageResponse, responses=NOT_FOUND)
def delete_voter(voter_id: int = Path(..., ge=0), service: VoterService = Depends(get_service)):
    service.delete_voter(voter_id)
    return MessageResponse(message="Delete OK")


@router.get("/{voter_id}/polls", response_model=List[VoteRecordModel], responses=NOT_FOUND)
def list_votes(voter_id: int = Path(..., ge=0), service: VoterService = Depends(get_service)):
    return [VoteRecordModel.from_record(vote) for vote in service.list_votes(voter_id)]


@router.post(
    "/{voter_id}/polls",
    response_model=VoteRecordModel,
    responses={**NOT_FOUND, **BAD_REQUEST, **CONFLICT}
)
@limiter.limit(current_rate_limit)
def create_vote(
    request: Request,
    vote: VoteRecordModel,
    voter_id: int = Path(..., ge=0),
    service: VoterService = Depends(get_service)
):
    """Append a vote to a voter's history."""
    service.create_vote(voter_id, vote.to_record())
    return vote


@router.get("/{voter_id}/polls/{poll_id}", response_model=VoteRecordModel, responses=NOT_FOUND)
def read_vote(
    voter_id: int = Path(..., ge=0),
    poll_id: int = Path(..., ge=0),
    service: VoterService = Depends(get_service)
):
    return VoteRecordModel.from_record(service.read_vote(voter_id, poll_id))


@router.put(
    "/{voter_id}/polls/{poll_id}",
    response_model=VoteRecordModel,
    responses={**NOT_FOUND, **BAD_REQUEST}
)
def replace_vote(
    vote: VoteRecordModel,
    voter_id: int = Path(..., ge=0),
    poll_id: int = Path(..., ge=0),
    service: VoterService = Depends(get_service)
):
    """Replace an existing vote. The body must name the same poll and voter as the path."""
    service.replace_vote(voter_id, poll_id, vote.to_record())
    return vote


@router.delete("/{voter_id}/polls/{poll_id}", response_model=MessageResponse, responses=NOT_FOUND)
def delete_vote(
    voter_id: int = Path(..., ge=0),
    poll_id: int = Path(..., ge=0),
    service: VoterService = Depends(get_service)
):
    service.delete_vote(voter_id, poll_id)
    return MessageResponse(message="Delete OK")


def create_app(
    app_settings: Settings = settings,
    store: Optional[RecordStore[Voter]] = None
) -> FastAPI:
    """
    Build the Voter API application.

    Args:
        app_settings: Settings to run with
        store: Store to use instead of the one selected by the settings

    Returns:
        FastAPI: The configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        logger.info(f"Starting {app_settings.SERVICE_NAME} service...")

        if getattr(app.state, "service", None) is None:
            try:
                app.state.service = VoterService(build_store(app_settings))
            except Exception as e:
                logger.error(f"Failed to start {app_settings.SERVICE_NAME}: {e}")
                raise

        logger.info(f"{app_settings.SERVICE_NAME} started successfully")

        yield

        logger.info(f"Shutting down {app_settings.SERVICE_NAME} service...")
        app.state.service.store.close()

    app = FastAPI(
        title="Voter API",
        description="API for managing voters and their poll history",
        version=app_settings.API_VERSION,
        lifespan=lifespan
    )
    app.state.service = VoterService(store) if store is not None else None
    app.state.settings = app_settings
    app.state.stats = RequestStats(app_settings.SERVICE_NAME, "/voters")

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=app_settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=app_settings.CORS_ALLOW_METHODS,
        allow_headers=app_settings.CORS_ALLOW_HEADERS,
    )

    # Add rate limiter
    global _rate_limit
    _rate_limit = app_settings.RATE_LIMIT
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    install_stats_middleware(app, app.state.stats)
    install_error_handlers(app)
    app.include_router(router)

    @app.get(
        "/health",
        response_model=HealthResponse,
        responses={
            503: {"model": HealthResponse, "description": "Service unhealthy"}
        }
    )
    def health_check(request: Request):
        """
        Check health of the service and its store.

        Reports uptime, the number of calls handled under /voters and the
        error responses seen so far, grouped by status code.
        """
        stats: RequestStats = request.app.state.stats
        service: VoterService = request.app.state.service

        store_healthy = service is not None and service.store.check_health()
        response = HealthResponse(
            status="ok" if store_healthy else "unhealthy",
            version=app_settings.API_VERSION,
            uptime=stats.uptime,
            total_calls=stats.total_calls,
            errors_encountered=stats.errors_by_status(),
            services={"store": "connected" if store_healthy else "disconnected"},
            timestamp=datetime.utcnow()
        )

        return JSONResponse(
            status_code=status.HTTP_200_OK if store_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(mode="json")
        )

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/")
    def root():
        """Root endpoint with API information."""
        return {
            "service": app_settings.SERVICE_NAME,
            "version": app_settings.API_VERSION,
            "status": "running",
            "backend": app_settings.STORE_BACKEND,
            "endpoints": {
                "voters": "/voters",
                "voter": "/voters/{voter_id}",
                "votes": "/voters/{voter_id}/polls",
                "vote": "/voters/{voter_id}/polls/{poll_id}",
                "health": "/health",
                "metrics": "/metrics"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level="info"
    )
