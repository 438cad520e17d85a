"""
Snapshot extractors.

The agent runtime reports its whole state after every step as a loosely
structured snapshot. Each extractor below reads one part of that snapshot and
turns it into zero or more stream events. Extractors are pure: they keep no
state and do no I/O beyond reading the working directory as a fallback path.

None of them raises on malformed input. A missing or ill-typed field yields
no event, and an ill-typed value inside an item falls back to its default.
Snapshots may be plain mappings or attribute objects; every read goes
through ``_field``.
"""

import logging
import os
from collections.abc import Container, Mapping
from datetime import datetime, timezone
from typing import Any, get_args

from .models import (
    FileEntry,
    InterruptEvent,
    InterruptRequest,
    Message,
    MessageEvent,
    Subagent,
    SubagentsEvent,
    SubagentStatus,
    Todo,
    TodosEvent,
    TodoStatus,
    WorkspaceEvent,
    gen_id,
    stable_id,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MESSAGES_FIELD = "messages"
TODOS_FIELD = "todos"
FILES_FIELD = "files"
SUBAGENTS_FIELD = "subagents"
INTERRUPT_FIELD = "__interrupt__"
WORKSPACE_PATH_FIELDS = ("workspacePath", "workspace_path")

ROLE_BY_TAG = {
    "human": "user",
    "user": "user",
    "ai": "assistant",
    "assistant": "assistant",
    "system": "system",
    "tool": "tool",
}
DEFAULT_ROLE = "assistant"

TODO_STATUSES = frozenset(get_args(TodoStatus))
SUBAGENT_STATUSES = frozenset(get_args(SubagentStatus))

_SCALARS = (str, bytes, bytearray, int, float, bool)
_SEQUENCES = (list, tuple)


# =============================================================================
# Total accessors
# =============================================================================


def _is_record(value: Any) -> bool:
    """True for values that can carry named fields (mappings or objects)."""
    if value is None or isinstance(value, _SCALARS):
        return False
    return not isinstance(value, (*_SEQUENCES, set, frozenset))


def _field(item: Any, key: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(key, default)
    if not _is_record(item):
        return default
    try:
        return getattr(item, key, default)
    except Exception:
        logger.debug("Unreadable attribute %r on %s", key, type(item).__name__)
        return default


def _first_field(item: Any, *keys: str) -> Any:
    for key in keys:
        value = _field(item, key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _identifier(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def _choice(value: Any, allowed: frozenset[str], default: str) -> str:
    return value if isinstance(value, str) and value in allowed else default


def _size(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _timestamp(value: Any) -> datetime | None:
    """Parse a datetime, an ISO-8601 string or epoch seconds."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


# =============================================================================
# Messages
# =============================================================================


def _message_tag(item: Any) -> str | None:
    """Read a message's type tag (human/ai/system/tool)."""
    for getter_name in ("_getType", "get_type"):
        getter = _field(item, getter_name)
        if callable(getter):
            try:
                tag = getter()
            except Exception:
                logger.debug("Message type getter %s failed", getter_name)
                continue
            if isinstance(tag, str):
                return tag
    for key in ("type", "role"):
        tag = _field(item, key)
        if isinstance(tag, str):
            return tag
    return None


def message_role(item: Any) -> str:
    """Map a message's tag to a role, defaulting to assistant."""
    return ROLE_BY_TAG.get(_message_tag(item) or "", DEFAULT_ROLE)


def message_content(raw: Any) -> str:
    """
    Flatten message content to text.

    A string is used verbatim. A sequence of content blocks contributes the
    text of its ``type == "text"`` blocks, in order. Anything else is empty.
    """
    if isinstance(raw, str):
        return raw
    if isinstance(raw, _SEQUENCES):
        return "".join(
            _text(_field(block, "text"))
            for block in raw
            if _is_record(block) and _field(block, "type") == "text"
        )
    return ""


def message_id(item: Any, index: int) -> str:
    """
    Return the message's own ID, or derive one.

    Derived IDs depend only on the message's position, tag and raw content,
    so an ID-less message reported by several snapshots keeps one ID.
    """
    existing = _identifier(_field(item, "id"))
    if existing is not None:
        return existing
    return stable_id("msg_", index, _message_tag(item), _field(item, "content"))


def extract_messages(snapshot: Any, seen: Container[str] = ()) -> list[MessageEvent]:
    """
    Extract assistant messages with text content.

    Args:
        snapshot: Raw runtime snapshot
        seen: Message IDs already emitted; these are skipped before any
            content is derived

    Returns:
        One MessageEvent per new assistant message with non-empty content
    """
    items = _field(snapshot, MESSAGES_FIELD)
    if not isinstance(items, _SEQUENCES):
        return []

    events: list[MessageEvent] = []
    created_at = datetime.now(timezone.utc)
    for index, item in enumerate(items):
        if not _is_record(item):
            continue
        msg_id = message_id(item, index)
        if msg_id in seen:
            continue
        role = message_role(item)
        if role != "assistant":
            continue
        content = message_content(_field(item, "content"))
        if not content:
            continue
        events.append(
            MessageEvent(
                message=Message(
                    id=msg_id,
                    role=role,
                    content=content,
                    tool_calls=_field(item, "tool_calls"),
                    created_at=created_at,
                )
            )
        )
    return events


# =============================================================================
# Todos
# =============================================================================


def extract_todos(snapshot: Any) -> list[TodosEvent]:
    """Extract the todo list. Absent, non-list or record-less lists emit nothing."""
    items = _field(snapshot, TODOS_FIELD)
    if not isinstance(items, _SEQUENCES) or not items:
        return []

    todos = [
        Todo(
            id=_identifier(_field(item, "id")) or gen_id("todo_"),
            content=_text(_field(item, "content")),
            status=_choice(_field(item, "status"), TODO_STATUSES, "pending"),
        )
        for item in items
        if _is_record(item)
    ]
    if not todos:
        return []
    return [TodosEvent(todos=todos)]


# =============================================================================
# Workspace
# =============================================================================


def _workspace_path(snapshot: Any, default_path: str | None) -> str:
    for key in WORKSPACE_PATH_FIELDS:
        path = _field(snapshot, key)
        if isinstance(path, str) and path:
            return path
    return default_path or os.getcwd()


def _files_from_mapping(files: Mapping[Any, Any]) -> list[FileEntry]:
    entries = []
    for path, data in files.items():
        if not isinstance(path, str) or not path:
            continue
        content = _field(data, "content")
        size = len(content) if isinstance(content, str) else None
        entries.append(FileEntry(path=path, is_dir=False, size=size))
    return entries


def _files_from_list(files: list[Any] | tuple[Any, ...]) -> list[FileEntry]:
    entries = []
    for entry in files:
        path = _field(entry, "path")
        if not isinstance(path, str) or not path:
            continue
        is_dir = _first_field(entry, "is_dir", "isDir")
        entries.append(
            FileEntry(
                path=path,
                is_dir=is_dir if isinstance(is_dir, bool) else False,
                size=_size(_field(entry, "size")),
            )
        )
    return entries


def extract_workspace(snapshot: Any, default_path: str | None = None) -> list[WorkspaceEvent]:
    """
    Extract the workspace file list.

    Files arrive either keyed by path (``{path: {content, lastModified}}``)
    or, from older runtimes, as a list of ``{path, is_dir, size}`` entries.

    Args:
        snapshot: Raw runtime snapshot
        default_path: Base path used when the snapshot names none
            (defaults to the current working directory)

    Returns:
        A single WorkspaceEvent, or nothing when there are no files
    """
    raw = _field(snapshot, FILES_FIELD)
    if isinstance(raw, Mapping):
        files = _files_from_mapping(raw)
    elif isinstance(raw, _SEQUENCES):
        files = _files_from_list(raw)
    else:
        return []

    if not files:
        return []
    return [WorkspaceEvent(files=files, path=_workspace_path(snapshot, default_path))]


# =============================================================================
# Subagents
# =============================================================================


def extract_subagents(snapshot: Any) -> list[SubagentsEvent]:
    """Extract subagent progress. Empty or absent lists emit nothing."""
    items = _field(snapshot, SUBAGENTS_FIELD)
    if not isinstance(items, _SEQUENCES) or not items:
        return []

    subagents = [
        Subagent(
            id=_identifier(_field(item, "id")) or gen_id("sub_"),
            name=_text(_field(item, "name")) or _text(_field(item, "type")) or "Subagent",
            description=_text(_field(item, "description")),
            status=_choice(_field(item, "status"), SUBAGENT_STATUSES, "pending"),
            started_at=_timestamp(_first_field(item, "startedAt", "started_at")),
            completed_at=_timestamp(_first_field(item, "completedAt", "completed_at")),
        )
        for item in items
        if _is_record(item)
    ]
    if not subagents:
        return []
    return [SubagentsEvent(subagents=subagents)]


# =============================================================================
# Interrupt
# =============================================================================


def extract_interrupt(snapshot: Any) -> list[InterruptEvent]:
    """
    Extract a human-in-the-loop pause.

    The interrupt field is a single optional value. Some runtimes report a
    list of interrupts; only its first element is surfaced. Empty scalars
    such as False, 0 or "" count as no interrupt.
    """
    raw = _field(snapshot, INTERRUPT_FIELD)
    if isinstance(raw, _SEQUENCES):
        raw = raw[0] if raw else None
    if raw is None or (isinstance(raw, _SCALARS) and not raw):
        return []

    tool_call = _field(raw, "tool_call")
    if tool_call is None:
        tool_call = _field(raw, "value")
    request = InterruptRequest(
        id=_identifier(_field(raw, "id")) or gen_id("int_"),
        tool_call=tool_call,
    )
    return [InterruptEvent(request=request)]


# =============================================================================
# Pipeline
# =============================================================================


def extract_events(
    snapshot: Any,
    seen: Container[str] = (),
    default_path: str | None = None,
) -> list[Any]:
    """
    Run every extractor over one snapshot in the fixed order
    messages, todos, workspace, subagents, interrupt.
    """
    return [
        *extract_messages(snapshot, seen),
        *extract_todos(snapshot),
        *extract_workspace(snapshot, default_path),
        *extract_subagents(snapshot),
        *extract_interrupt(snapshot),
    ]
