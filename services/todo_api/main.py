"""FastAPI application for the Todo API."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Path, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..shared.http import RequestStats, install_error_handlers, install_stats_middleware
from ..shared.models import ToDoItem
from ..shared.storage import RecordStore, create_store
from .config import Settings, settings
from .models import ToDoItemModel, DoneStatusRequest
from .service import TodoService

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todo", tags=["Todo"])


def get_service(request: Request) -> TodoService:
    return request.app.state.service


@router.get("", response_model=List[ToDoItemModel])
def list_items(service: TodoService = Depends(get_service)):
    return [ToDoItemModel.from_item(item) for item in service.list_items()]


@router.post("", response_model=ToDoItemModel)
def create_item(item: ToDoItemModel, service: TodoService = Depends(get_service)):
    service.create_item(item.to_item())
    return item


@router.delete("")
def clear_items(service: TodoService = Depends(get_service)):
    service.clear_items()
    return {"message": "Delete OK"}


@router.get("/{item_id}", response_model=ToDoItemModel)
def read_item(item_id: int = Path(..., ge=0), service: TodoService = Depends(get_service)):
    return ToDoItemModel.from_item(service.read_item(item_id))


@router.put("/{item_id}", response_model=ToDoItemModel)
def replace_item(
    item: ToDoItemModel,
    item_id: int = Path(..., ge=0),
    service: TodoService = Depends(get_service)
):
    service.replace_item(item_id, item.to_item())
    return item


@router.patch("/{item_id}", response_model=ToDoItemModel)
def change_done_status(
    body: DoneStatusRequest,
    item_id: int = Path(..., ge=0),
    service: TodoService = Depends(get_service)
):
    """Mark an item done or not done."""
    return ToDoItemModel.from_item(service.change_done_status(item_id, body.is_done))


@router.delete("/{item_id}")
def delete_item(item_id: int = Path(..., ge=0), service: TodoService = Depends(get_service)):
    service.delete_item(item_id)
    return {"message": "Delete OK"}


def create_app(
    app_settings: Settings = settings,
    store: Optional[RecordStore[ToDoItem]] = None
) -> FastAPI:
    """Build the Todo API application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {app_settings.SERVICE_NAME} service...")
        if getattr(app.state, "service", None) is None:
            app.state.service = TodoService(create_store(
                ToDoItem,
                backend=app_settings.STORE_BACKEND,
                redis_url=app_settings.redis_url,
                key_prefix=app_settings.REDIS_KEY_PREFIX,
                max_connections=app_settings.REDIS_MAX_CONNECTIONS,
            ))
        yield
        logger.info(f"Shutting down {app_settings.SERVICE_NAME} service...")
        app.state.service.store.close()

    app = FastAPI(
        title="Todo API",
        description="API for managing todo items",
        version=app_settings.API_VERSION,
        lifespan=lifespan
    )
    app.state.service = TodoService(store) if store is not None else None
    app.state.settings = app_settings
    app.state.stats = RequestStats(app_settings.SERVICE_NAME, "/todo")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_stats_middleware(app, app.state.stats)
    install_error_handlers(app)
    app.include_router(router)

    @app.get("/health")
    def health_check(request: Request):
        stats: RequestStats = request.app.state.stats
        service: TodoService = request.app.state.service

        store_healthy = service is not None and service.store.check_health()
        return JSONResponse(
            status_code=status.HTTP_200_OK if store_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ok" if store_healthy else "unhealthy",
                "version": app_settings.API_VERSION,
                "uptime": stats.uptime,
                "total_calls": stats.total_calls,
                "errors_encountered": stats.errors_by_status(),
                "services": {"store": "connected" if store_healthy else "disconnected"},
                "timestamp": datetime.utcnow().isoformat()
            }
        )

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
