"""
Domain models for the agent stream core.

These are the data structures shared by extractors, sessions and the
resumer, and the wire contract sent to presentation layers.
"""

from .decision import ALLOWED_DECISIONS, DecisionType, HITLDecision, InterruptRequest
from .file_entry import FileEntry
from .message import Message, MessageRole
from .stream_event import (
    TERMINAL_EVENT_TYPES,
    DoneEvent,
    DoneReason,
    ErrorEvent,
    InterruptEvent,
    MessageEvent,
    StreamEvent,
    SubagentsEvent,
    TodosEvent,
    WorkspaceEvent,
    is_terminal,
    stream_event_adapter,
)
from .subagent import Subagent, SubagentStatus
from .todo import Todo, TodoStatus
from .utils import gen_id, stable_id

__all__ = [
    # Utils
    "gen_id",
    "stable_id",
    # Payload models
    "Message",
    "MessageRole",
    "Todo",
    "TodoStatus",
    "FileEntry",
    "Subagent",
    "SubagentStatus",
    # HITL models
    "ALLOWED_DECISIONS",
    "DecisionType",
    "HITLDecision",
    "InterruptRequest",
    # Events
    "StreamEvent",
    "MessageEvent",
    "TodosEvent",
    "WorkspaceEvent",
    "SubagentsEvent",
    "InterruptEvent",
    "DoneEvent",
    "DoneReason",
    "ErrorEvent",
    "TERMINAL_EVENT_TYPES",
    "is_terminal",
    "stream_event_adapter",
]
