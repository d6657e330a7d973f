"""
Shared models and storage for the voter and todo services.

This package contains common code used by both services:
- Data models (Voter, VoteRecord, ToDoItem) and history validation
- Error types raised by the model and the stores
- The RecordStore interface with in-memory and Redis implementations
"""

from .errors import (
    RecordError,
    NotFoundError,
    AlreadyExistsError,
    RecordValidationError,
)
from .models import (
    Voter,
    VoteRecord,
    ToDoItem,
    ValidationFailure,
)
from .storage import (
    RecordStore,
    InMemoryStore,
    RedisStore,
    create_store,
)

__all__ = [
    'RecordError',
    'NotFoundError',
    'AlreadyExistsError',
    'RecordValidationError',
    'Voter',
    'VoteRecord',
    'ToDoItem',
    'ValidationFailure',
    'RecordStore',
    'InMemoryStore',
    'RedisStore',
    'create_store',
]

__version__ = '1.0.0'
