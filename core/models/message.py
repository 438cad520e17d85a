"""Message models."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

MessageRole = Literal["user", "assistant", "system", "tool"]


class Message(BaseModel):
    id: str
    role: MessageRole
    content: str
    tool_calls: Any | None = None
    created_at: datetime
