"""Pydantic models for request/response validation."""
from pydantic import BaseModel, Field

from ..shared.models import ToDoItem


class ToDoItemModel(BaseModel):
    """Todo item request and response model."""

    id: int = Field(..., ge=0, description="Unique item identifier, assigned by the client")
    title: str = Field(default="", description="What needs doing")
    is_done: bool = Field(default=False, description="Whether the item is complete")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "title": "Learn FastAPI",
                "is_done": False
            }
        }

    def to_item(self) -> ToDoItem:
        return ToDoItem(id=self.id, title=self.title, is_done=self.is_done)

    @classmethod
    def from_item(cls, item: ToDoItem) -> "ToDoItemModel":
        return cls(id=item.id, title=item.title, is_done=item.is_done)


class DoneStatusRequest(BaseModel):
    """Body of a done-status change."""

    is_done: bool = Field(..., description="New completion flag")
