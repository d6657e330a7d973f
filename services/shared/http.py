"""Request statistics and error mapping shared by the voter and todo APIs."""

import logging
import time
from typing import Dict

import redis
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from .errors import AlreadyExistsError, NotFoundError, RecordValidationError

logger = logging.getLogger(__name__)

# Prometheus metrics
api_requests = Counter(
    "api_requests_total",
    "Total number of API requests",
    ["service", "method", "status"]
)
api_errors = Counter(
    "api_request_errors_total",
    "Total number of API error responses",
    ["service", "status"]
)
request_duration = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["service", "method", "endpoint"]
)


class RequestStats:
    """
    Call and error counters for one service.

    Only requests whose path starts with ``path_prefix`` are counted,
    so health and metrics polling does not inflate the numbers.
    """

    def __init__(self, service_name: str, path_prefix: str):
        self.service_name = service_name
        self.path_prefix = path_prefix
        self.boot_time = time.monotonic()
        self.total_calls = 0
        self.errors: Dict[int, int] = {}

    def tracks(self, path: str) -> bool:
        return path.startswith(self.path_prefix)

    def record(self, method: str, status_code: int) -> None:
        self.total_calls += 1
        api_requests.labels(
            service=self.service_name,
            method=method,
            status=status_code
        ).inc()
        if status_code >= 400:
            self.errors[status_code] = self.errors.get(status_code, 0) + 1
            api_errors.labels(service=self.service_name, status=status_code).inc()

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.boot_time

    def errors_by_status(self) -> Dict[str, int]:
        return {str(code): count for code, count in sorted(self.errors.items())}


def install_stats_middleware(app: FastAPI, stats: RequestStats) -> None:
    """Count requests and time them for Prometheus."""

    @app.middleware("http")
    async def stats_middleware(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            if stats.tracks(request.url.path):
                stats.record(request.method, 500)
            raise

        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        request_duration.labels(
            service=stats.service_name,
            method=request.method,
            endpoint=endpoint
        ).observe(time.perf_counter() - started)

        if stats.tracks(request.url.path):
            stats.record(request.method, response.status_code)

        return response


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def install_error_handlers(app: FastAPI) -> None:
    """
    Map record errors to HTTP responses.

    NotFoundError -> 404, AlreadyExistsError -> 409,
    RecordValidationError -> 400, storage failures -> 500.
    """

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(AlreadyExistsError)
    async def already_exists_handler(request: Request, exc: AlreadyExistsError):
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(RecordValidationError)
    async def validation_handler(request: Request, exc: RecordValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(redis.RedisError)
    async def storage_error_handler(request: Request, exc: redis.RedisError):
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
