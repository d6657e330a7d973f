"""Todo API: HTTP service for todo items, sharing the voter stores."""

from .main import app, create_app
from .service import TodoService

__all__ = ['app', 'create_app', 'TodoService']
