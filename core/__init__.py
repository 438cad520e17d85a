"""
Core business logic package.

This package contains the transport-agnostic agent stream core: snapshot
extraction, the per-thread stream session, the run registry and the
interrupt resumer. The server package provides HTTP/SSE bindings around it.
"""

from .cancellation import CancellationToken
from .dedup import DedupTracker
from .exceptions import (
    CoreError,
    InvalidDecisionError,
    InvalidOperationError,
    NoPendingInterrupt,
    NotFoundError,
    RunAlreadyActiveError,
    RuntimeResumeFault,
    SnapshotFault,
    TransportUnavailable,
)
from .extractors import (
    extract_events,
    extract_interrupt,
    extract_messages,
    extract_subagents,
    extract_todos,
    extract_workspace,
)
from .models import (
    ALLOWED_DECISIONS,
    DoneEvent,
    ErrorEvent,
    FileEntry,
    HITLDecision,
    InterruptEvent,
    InterruptRequest,
    Message,
    MessageEvent,
    StreamEvent,
    Subagent,
    SubagentsEvent,
    Todo,
    TodosEvent,
    WorkspaceEvent,
    gen_id,
    is_terminal,
)
from .registry import RunHandle, RunRegistry
from .resumer import InterruptResumer
from .runtime import AgentRuntime, Continuation, RawSnapshot
from .service import AgentService, channel_name
from .session import SessionState, StreamSession
from .transport import NullTransport, Transport

__all__ = [
    # Exceptions
    "CoreError",
    "NotFoundError",
    "InvalidOperationError",
    "RunAlreadyActiveError",
    "TransportUnavailable",
    "SnapshotFault",
    "NoPendingInterrupt",
    "InvalidDecisionError",
    "RuntimeResumeFault",
    # Models
    "Message",
    "Todo",
    "FileEntry",
    "Subagent",
    "InterruptRequest",
    "HITLDecision",
    "ALLOWED_DECISIONS",
    "StreamEvent",
    "MessageEvent",
    "TodosEvent",
    "WorkspaceEvent",
    "SubagentsEvent",
    "InterruptEvent",
    "DoneEvent",
    "ErrorEvent",
    "is_terminal",
    "gen_id",
    # Extractors
    "extract_events",
    "extract_messages",
    "extract_todos",
    "extract_workspace",
    "extract_subagents",
    "extract_interrupt",
    # Run lifecycle
    "CancellationToken",
    "DedupTracker",
    "RunHandle",
    "RunRegistry",
    "SessionState",
    "StreamSession",
    "InterruptResumer",
    # Collaborators
    "AgentRuntime",
    "Continuation",
    "RawSnapshot",
    "Transport",
    "NullTransport",
    # Boundary
    "AgentService",
    "channel_name",
]
