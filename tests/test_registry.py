"""
Tests for the run registry, cancellation tokens and dedup tracker.
"""
import threading

import pytest

from core import CancellationToken, DedupTracker, RunAlreadyActiveError, RunRegistry


class TestCancellationToken:
    def test_starts_clear(self):
        token = CancellationToken()

        assert token.is_cancelled() is False
        assert token.reason is None

    def test_first_reason_wins(self):
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")

        assert token.is_cancelled() is True
        assert token.reason == "first"


class TestDedupTracker:
    def test_record_once(self):
        tracker = DedupTracker()

        assert tracker.record("m1") is True
        assert tracker.record("m1") is False
        assert "m1" in tracker
        assert len(tracker) == 1


class TestRunRegistry:
    """Test registry lifecycle operations."""

    def test_register(self, registry):
        token = registry.register("t1")

        assert isinstance(token, CancellationToken)
        assert registry.is_active("t1")
        assert registry.get("t1").token is token
        assert len(registry) == 1

    def test_register_twice_rejected(self, registry):
        registry.register("t1")

        with pytest.raises(RunAlreadyActiveError):
            registry.register("t1")

    def test_cancel_signals_and_removes(self, registry):
        token = registry.register("t1")

        assert registry.cancel("t1") is True
        assert token.is_cancelled()
        assert not registry.is_active("t1")

    def test_cancel_unknown_is_noop(self, registry):
        assert registry.cancel("missing") is False
        assert registry.cancel("missing") is False

    def test_remove_does_not_signal(self, registry):
        token = registry.register("t1")

        assert registry.remove("t1") is True
        assert not token.is_cancelled()
        assert registry.remove("t1") is False

    def test_remove_with_stale_token_keeps_newer_run(self, registry):
        old = registry.register("t1")
        registry.cancel("t1")
        new = registry.register("t1")

        assert registry.remove("t1", old) is False
        assert registry.get("t1").token is new
        assert registry.remove("t1", new) is True

    def test_active_threads(self, registry):
        registry.register("a")
        registry.register("b")

        assert sorted(registry.active_threads()) == ["a", "b"]

    def test_handles_have_distinct_run_ids(self, registry):
        first = registry.register_handle("a")
        second = registry.register_handle("b")

        assert first.run_id != second.run_id


class TestRegistryConcurrency:
    """Register and cancel racing from many OS threads."""

    def test_concurrent_register_single_winner(self, registry):
        barrier = threading.Barrier(16)
        wins = []
        losses = []

        def worker():
            barrier.wait()
            try:
                wins.append(registry.register("shared"))
            except RunAlreadyActiveError:
                losses.append(1)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(wins) == 1
        assert len(losses) == 15

    def test_register_cancel_race_leaves_consistent_state(self, registry):
        tokens = []
        lock = threading.Lock()

        def registrar():
            for _ in range(200):
                try:
                    token = registry.register("t")
                except RunAlreadyActiveError:
                    continue
                with lock:
                    tokens.append(token)

        def canceller():
            for _ in range(200):
                registry.cancel("t")

        threads = [threading.Thread(target=registrar), threading.Thread(target=canceller)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        handle = registry.get("t")
        # Every token but the one still registered was signaled
        live = [token for token in tokens if not token.is_cancelled()]
        if handle is None:
            assert live == []
        else:
            assert live == [handle.token]
