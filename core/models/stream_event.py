"""StreamEvent models.

The tagged union below is the only thing that crosses the boundary between
the core and a presentation layer.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from .decision import InterruptRequest
from .file_entry import FileEntry
from .message import Message
from .subagent import Subagent
from .todo import Todo

DoneReason = Literal["completed", "cancelled"]


class MessageEvent(BaseModel):
    type: Literal["message"] = "message"
    message: Message


class TodosEvent(BaseModel):
    type: Literal["todos"] = "todos"
    todos: list[Todo]


class WorkspaceEvent(BaseModel):
    type: Literal["workspace"] = "workspace"
    files: list[FileEntry] = Field(min_length=1)
    path: str


class SubagentsEvent(BaseModel):
    type: Literal["subagents"] = "subagents"
    subagents: list[Subagent]


class InterruptEvent(BaseModel):
    type: Literal["interrupt"] = "interrupt"
    request: InterruptRequest


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"
    result: Any | None = None
    reason: DoneReason = "completed"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


StreamEvent = Annotated[
    MessageEvent
    | TodosEvent
    | WorkspaceEvent
    | SubagentsEvent
    | InterruptEvent
    | DoneEvent
    | ErrorEvent,
    Field(discriminator="type"),
]

TERMINAL_EVENT_TYPES = frozenset({"done", "error"})

stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


def is_terminal(event: BaseModel | dict[str, Any]) -> bool:
    """Return True for Done and Error events, in model or wire form."""
    if isinstance(event, dict):
        return event.get("type") in TERMINAL_EVENT_TYPES
    return getattr(event, "type", None) in TERMINAL_EVENT_TYPES
