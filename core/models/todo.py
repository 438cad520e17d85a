"""Todo model."""

from typing import Literal

from pydantic import BaseModel

TodoStatus = Literal["pending", "in_progress", "completed", "cancelled"]


class Todo(BaseModel):
    id: str
    content: str = ""
    status: TodoStatus = "pending"
