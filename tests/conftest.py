"""
Shared pytest fixtures for all tests.
"""
import tempfile
from pathlib import Path
from typing import Any, Iterator

import pytest
from pydantic import BaseModel

from core import CancellationToken, Continuation, RunRegistry, TransportUnavailable


class ScriptedRuntime:
    """
    AgentRuntime that replays a fixed list of snapshots.

    An item that is an Exception is raised instead of yielded. The runtime
    records every call so tests can check what the core asked of it.
    """

    def __init__(self, snapshots: list[Any] | None = None, interrupt: dict[str, Any] | None = None):
        self.snapshots = list(snapshots or [])
        self.interrupt = interrupt
        self.stream_calls: list[tuple[str | None, str]] = []
        self.pulled = 0
        self.closed = False
        self.updates: list[tuple[str, str | None, dict[str, Any]]] = []
        self.continuations: list[tuple[str, Continuation]] = []
        self.fail_resume: Exception | None = None
        self.on_pull: Any = None

    async def stream(self, message: str | None, *, thread_id: str, cancellation_token: CancellationToken):
        self.stream_calls.append((message, thread_id))
        try:
            for item in self.snapshots:
                self.pulled += 1
                if self.on_pull is not None:
                    self.on_pull(self.pulled, cancellation_token)
                if isinstance(item, Exception):
                    raise item
                yield item
        finally:
            self.closed = True

    async def get_interrupt(self, thread_id: str) -> dict[str, Any] | None:
        return self.interrupt

    async def update_tool_call(self, thread_id: str, tool_call_id: str | None, args: dict[str, Any]) -> None:
        if self.fail_resume is not None:
            raise self.fail_resume
        self.updates.append((thread_id, tool_call_id, args))

    async def resume(self, thread_id: str, continuation: Continuation) -> None:
        if self.fail_resume is not None:
            raise self.fail_resume
        self.continuations.append((thread_id, continuation))
        self.interrupt = None


class RecordingTransport:
    """Transport that keeps every event it is sent."""

    def __init__(self, fail_with: Exception | None = None):
        self.sent: list[tuple[str, BaseModel]] = []
        self.fail_with = fail_with

    async def send(self, channel: str, event: BaseModel) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((channel, event))

    @property
    def events(self) -> list[BaseModel]:
        return [event for _, event in self.sent]

    @property
    def types(self) -> list[str]:
        return [event.type for event in self.events]


class GoneTransport(RecordingTransport):
    """Transport whose recipient disconnects after a number of events."""

    def __init__(self, deliver: int):
        super().__init__()
        self.deliver = deliver

    async def send(self, channel: str, event: BaseModel) -> None:
        if len(self.sent) >= self.deliver:
            raise TransportUnavailable(channel)
        self.sent.append((channel, event))


def ai(msg_id: str | None, content: Any, **extra: Any) -> dict[str, Any]:
    """An assistant message as the runtime reports it."""
    message = {"type": "ai", "content": content, **extra}
    if msg_id is not None:
        message["id"] = msg_id
    return message


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up mock environment variables for testing."""
    # Set a test API key to avoid requiring real credentials
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key-123")
    return monkeypatch


@pytest.fixture
def registry() -> RunRegistry:
    return RunRegistry()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    """sse-starlette caches an exit event bound to the first event loop it saw."""
    import sse_starlette.sse as sse

    status = getattr(sse, "AppStatus", None)
    if status is not None and hasattr(status, "should_exit_event"):
        status.should_exit_event = None
    yield
