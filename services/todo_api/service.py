"""Todo item operations over a record store."""

import logging
from dataclasses import replace
from typing import List

from ..shared.errors import NotFoundError, RecordValidationError
from ..shared.models import ToDoItem
from ..shared.storage import RecordStore

logger = logging.getLogger(__name__)


class TodoService:
    """Operations exposed by the Todo API."""

    def __init__(self, store: RecordStore[ToDoItem]):
        self.store = store

    def list_items(self) -> List[ToDoItem]:
        return self.store.get_all()

    def create_item(self, item: ToDoItem) -> ToDoItem:
        self.store.add(item)
        logger.info(f"Todo item {item.id} created")
        return item

    def read_item(self, item_id: int) -> ToDoItem:
        try:
            return self.store.get(item_id)
        except NotFoundError:
            raise NotFoundError(f"Todo item {item_id} not found") from None

    def replace_item(self, item_id: int, item: ToDoItem) -> ToDoItem:
        if item.id != item_id:
            raise RecordValidationError(f"Item id {item.id} does not match path id {item_id}")
        try:
            self.store.update(item)
        except NotFoundError:
            raise NotFoundError(f"Todo item {item_id} not found") from None
        logger.info(f"Todo item {item_id} replaced")
        return item

    def change_done_status(self, item_id: int, is_done: bool) -> ToDoItem:
        item = replace(self.read_item(item_id), is_done=is_done)
        self.store.update(item)
        logger.info(f"Todo item {item_id} marked {'done' if is_done else 'not done'}")
        return item

    def delete_item(self, item_id: int) -> None:
        try:
            self.store.delete(item_id)
        except NotFoundError:
            raise NotFoundError(f"Todo item {item_id} not found") from None
        logger.info(f"Todo item {item_id} deleted")

    def clear_items(self) -> None:
        self.store.delete_all()
        logger.info("All todo items deleted")
