"""
Tests for snapshot extractors.

Snapshots are loosely structured, so most tests feed partial or malformed
data and check that the extractors degrade to "no event" instead of raising.
"""
import os
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from core import (
    DedupTracker,
    InterruptEvent,
    MessageEvent,
    SubagentsEvent,
    TodosEvent,
    WorkspaceEvent,
    extract_events,
    extract_interrupt,
    extract_messages,
    extract_subagents,
    extract_todos,
    extract_workspace,
)
from core.extractors import message_content, message_id, message_role
from tests.conftest import ai


class TestExtractMessages:
    """Test assistant message extraction."""

    def test_string_content(self):
        events = extract_messages({"messages": [ai("m1", "hello")]})

        assert len(events) == 1
        assert isinstance(events[0], MessageEvent)
        assert events[0].message.id == "m1"
        assert events[0].message.role == "assistant"
        assert events[0].message.content == "hello"

    def test_block_content_concatenates_text_blocks(self):
        content = [
            {"type": "text", "text": "a"},
            {"type": "tool_use", "id": "t1", "name": "x", "input": {}},
            {"type": "text", "text": "b"},
        ]
        events = extract_messages({"messages": [ai("m1", content)]})

        assert events[0].message.content == "ab"

    def test_skips_non_assistant_messages(self):
        snapshot = {
            "messages": [
                {"id": "h1", "type": "human", "content": "hi"},
                {"id": "s1", "type": "system", "content": "be nice"},
                {"id": "t1", "type": "tool", "content": "result"},
                ai("a1", "answer"),
            ]
        }
        events = extract_messages(snapshot)

        assert [e.message.id for e in events] == ["a1"]

    def test_skips_empty_content(self):
        snapshot = {
            "messages": [
                ai("a1", ""),
                ai("a2", [{"type": "tool_use", "id": "t", "name": "x"}]),
                ai("a3", None),
                ai("a4", 42),
            ]
        }

        assert extract_messages(snapshot) == []

    def test_seen_ids_are_skipped(self):
        snapshot = {"messages": [ai("m1", "one"), ai("m2", "two")]}

        events = extract_messages(snapshot, seen={"m1"})

        assert [e.message.id for e in events] == ["m2"]

    def test_seen_accepts_dedup_tracker(self):
        tracker = DedupTracker()
        tracker.record("m1")

        events = extract_messages({"messages": [ai("m1", "one")]}, seen=tracker)

        assert events == []

    def test_tool_calls_passed_through(self):
        calls = [{"id": "c1", "name": "write_file", "args": {"path": "a"}}]
        events = extract_messages({"messages": [ai("m1", "calling", tool_calls=calls)]})

        assert events[0].message.tool_calls == calls

    def test_missing_or_invalid_messages_field(self):
        assert extract_messages({}) == []
        assert extract_messages({"messages": "nope"}) == []
        assert extract_messages({"messages": [None, 3, "x"]}) == []
        assert extract_messages(None) == []

    def test_attribute_objects(self):
        message = SimpleNamespace(id="m1", type="ai", content="from object")
        snapshot = SimpleNamespace(messages=[message])

        events = extract_messages(snapshot)

        assert events[0].message.content == "from object"

    def test_type_getter_method(self):
        class LegacyMessage:
            id = "m1"
            content = "legacy"

            def _getType(self):
                return "ai"

        events = extract_messages({"messages": [LegacyMessage()]})

        assert events[0].message.id == "m1"

    def test_missing_id_is_stable_across_snapshots(self):
        first = extract_messages({"messages": [ai(None, "no id")]})
        second = extract_messages({"messages": [ai(None, "no id")]})

        assert first[0].message.id == second[0].message.id
        assert first[0].message.id.startswith("msg_")

    def test_created_at_is_utc(self):
        events = extract_messages({"messages": [ai("m1", "x")]})

        assert events[0].message.created_at.tzinfo is not None


class TestMessageHelpers:
    """Test message field helpers."""

    @pytest.mark.parametrize(
        "tag,role",
        [("human", "user"), ("ai", "assistant"), ("system", "system"), ("tool", "tool"), ("other", "assistant")],
    )
    def test_roles(self, tag, role):
        assert message_role({"type": tag}) == role

    def test_role_key_fallback(self):
        assert message_role({"role": "user"}) == "user"
        assert message_role({}) == "assistant"

    def test_content_non_text_blocks(self):
        assert message_content([{"type": "image", "text": "ignored"}, "loose", None]) == ""

    def test_integer_id(self):
        assert message_id({"id": 7}, 0) == "7"

    def test_different_positions_different_ids(self):
        assert message_id({"content": "x"}, 0) != message_id({"content": "x"}, 1)


class TestExtractTodos:
    """Test todo extraction."""

    def test_todos(self):
        snapshot = {
            "todos": [
                {"id": "t1", "content": "Write tests", "status": "in_progress"},
                {"id": "t2", "content": "Ship", "status": "completed"},
            ]
        }
        events = extract_todos(snapshot)

        assert len(events) == 1
        assert isinstance(events[0], TodosEvent)
        assert [(t.id, t.status) for t in events[0].todos] == [("t1", "in_progress"), ("t2", "completed")]

    def test_defaults_for_bad_fields(self):
        events = extract_todos({"todos": [{"content": 5, "status": "bogus"}]})

        todo = events[0].todos[0]
        assert todo.id.startswith("todo_")
        assert todo.content == ""
        assert todo.status == "pending"

    def test_empty_or_missing(self):
        assert extract_todos({}) == []
        assert extract_todos({"todos": []}) == []
        assert extract_todos({"todos": {"a": 1}}) == []

    def test_no_record_items(self):
        assert extract_todos({"todos": [None, 1, "x"]}) == []


class TestExtractWorkspace:
    """Test workspace file extraction."""

    def test_files_mapping(self):
        events = extract_workspace({"files": {"a.txt": {"content": "hi"}}, "workspacePath": "/ws"})

        assert len(events) == 1
        assert isinstance(events[0], WorkspaceEvent)
        assert events[0].path == "/ws"
        entry = events[0].files[0]
        assert entry.path == "a.txt"
        assert entry.is_dir is False
        assert entry.size == 2

    def test_non_string_content_has_no_size(self):
        events = extract_workspace({"files": {"bin": {"content": b"\x00"}}})

        assert events[0].files[0].size is None

    def test_files_list(self):
        snapshot = {
            "files": [
                {"path": "src", "is_dir": True},
                {"path": "src/main.py", "size": 120},
                {"path": "", "size": 1},
                {"size": 3},
            ]
        }
        events = extract_workspace(snapshot, default_path="/base")

        files = events[0].files
        assert [(f.path, f.is_dir, f.size) for f in files] == [("src", True, None), ("src/main.py", False, 120)]
        assert events[0].path == "/base"

    def test_invalid_size_dropped(self):
        events = extract_workspace({"files": [{"path": "x", "size": -1}, {"path": "y", "size": "10"}]})

        assert [f.size for f in events[0].files] == [None, None]

    def test_no_files_no_event(self):
        assert extract_workspace({}) == []
        assert extract_workspace({"files": {}}) == []
        assert extract_workspace({"files": []}) == []
        assert extract_workspace({"files": [{"size": 1}]}) == []
        assert extract_workspace({"files": "a.txt"}) == []

    def test_path_falls_back_to_cwd(self):
        events = extract_workspace({"files": {"a": {"content": ""}}})

        assert events[0].path == os.getcwd()


class TestExtractSubagents:
    """Test subagent extraction."""

    def test_subagents(self):
        snapshot = {
            "subagents": [
                {
                    "id": "s1",
                    "name": "researcher",
                    "description": "Looks things up",
                    "status": "running",
                    "startedAt": "2024-05-01T10:00:00Z",
                }
            ]
        }
        events = extract_subagents(snapshot)

        assert isinstance(events[0], SubagentsEvent)
        sub = events[0].subagents[0]
        assert sub.name == "researcher"
        assert sub.status == "running"
        assert sub.started_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert sub.completed_at is None

    def test_defaults(self):
        events = extract_subagents({"subagents": [{"status": "weird", "startedAt": "not a date"}]})

        sub = events[0].subagents[0]
        assert sub.id.startswith("sub_")
        assert sub.name == "Subagent"
        assert sub.status == "pending"
        assert sub.started_at is None

    def test_type_used_as_name(self):
        events = extract_subagents({"subagents": [{"id": "s", "type": "coder"}]})

        assert events[0].subagents[0].name == "coder"

    def test_epoch_timestamps(self):
        events = extract_subagents({"subagents": [{"id": "s", "completed_at": 0}]})

        assert events[0].subagents[0].completed_at == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_empty(self):
        assert extract_subagents({"subagents": []}) == []
        assert extract_subagents({"subagents": [None]}) == []


class TestExtractInterrupt:
    """Test interrupt extraction."""

    def test_interrupt(self):
        call = {"id": "c1", "name": "write_file", "args": {"path": "a"}}
        events = extract_interrupt({"__interrupt__": {"id": "i1", "tool_call": call}})

        assert isinstance(events[0], InterruptEvent)
        assert events[0].request.id == "i1"
        assert events[0].request.tool_call == call
        assert events[0].request.allowed_decisions == ["approve", "reject", "edit"]

    def test_list_uses_first(self):
        events = extract_interrupt({"__interrupt__": [{"id": "i1", "value": {"x": 1}}, {"id": "i2"}]})

        assert len(events) == 1
        assert events[0].request.id == "i1"
        assert events[0].request.tool_call == {"x": 1}

    def test_generated_id(self):
        events = extract_interrupt({"__interrupt__": {"tool_call": None}})

        assert events[0].request.id.startswith("int_")

    def test_absent(self):
        assert extract_interrupt({}) == []
        assert extract_interrupt({"__interrupt__": None}) == []
        assert extract_interrupt({"__interrupt__": []}) == []

    @pytest.mark.parametrize("value", [False, 0, "", [False]])
    def test_empty_scalars_are_absent(self, value):
        assert extract_interrupt({"__interrupt__": value}) == []


class TestExtractEvents:
    """Test the combined extraction pipeline."""

    def test_fixed_order(self):
        snapshot = {
            "__interrupt__": {"id": "i1"},
            "subagents": [{"id": "s1"}],
            "files": {"a": {"content": "x"}},
            "todos": [{"id": "t1", "content": "x"}],
            "messages": [ai("m1", "x")],
        }

        events = extract_events(snapshot, default_path="/ws")

        assert [e.type for e in events] == ["message", "todos", "workspace", "subagents", "interrupt"]

    def test_empty_snapshot(self):
        assert extract_events({}) == []
