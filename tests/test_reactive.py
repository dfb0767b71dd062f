"""Tests for the signal / computed / effect primitives."""

import pytest

from finance_tracker.reactive import Computed, Signal, effect


class TestSignal:
    """Tests for writable signals."""

    def test_read_and_set(self):
        """Test that set replaces the value and bumps the version."""
        counter = Signal(1)
        counter.set(2)
        assert counter() == 2
        assert counter.get() == 2
        assert counter.version == 1

    def test_set_same_object_is_noop(self):
        """Test that setting the identical object notifies nobody."""
        items = (1, 2)
        signal = Signal(items)
        seen = []
        signal.subscribe(seen.append)

        signal.set(items)

        assert seen == []
        assert signal.version == 0

    def test_update_applies_function(self):
        signal = Signal(10)
        signal.update(lambda v: v + 5)
        assert signal() == 15

    def test_unsubscribe_stops_notifications(self):
        signal = Signal(0)
        seen = []
        stop = signal.subscribe(seen.append)
        signal.set(1)
        stop()
        signal.set(2)
        assert seen == [1]

    def test_failing_subscriber_does_not_block_others(self):
        """Test that one raising callback doesn't stop delivery."""
        signal = Signal(0)
        seen = []

        def broken(_value):
            raise RuntimeError("boom")

        signal.subscribe(broken)
        signal.subscribe(seen.append)
        signal.set(1)

        assert seen == [1]
        assert signal() == 1

    def test_readonly_view_tracks_source(self):
        signal = Signal("a")
        view = signal.as_readonly()
        signal.set("b")
        assert view() == "b"
        assert view.version == signal.version
        assert not hasattr(view, "set")


class TestComputed:
    """Tests for derived values."""

    def test_never_stale_on_read(self):
        """Test that a read after a change reflects the change."""
        base = Signal(2)
        doubled = Computed(lambda: base() * 2, base)
        assert doubled() == 4
        base.set(5)
        assert doubled() == 10

    def test_recomputes_only_when_source_changes(self):
        calls = []
        base = Signal(1)

        def compute():
            calls.append(1)
            return base() + 1

        derived = Computed(compute, base)
        derived()
        derived()
        assert len(calls) == 1

        base.set(3)
        derived()
        assert len(calls) == 2

    def test_subscribers_receive_fresh_value(self):
        base = Signal(1)
        squared = Computed(lambda: base() ** 2, base)
        seen = []
        squared.subscribe(seen.append)

        base.set(3)
        base.set(4)

        assert seen == [9, 16]

    def test_chained_computed(self):
        base = Signal(1)
        plus_one = Computed(lambda: base() + 1, base)
        times_ten = Computed(lambda: plus_one() * 10, plus_one)
        seen = []
        times_ten.subscribe(seen.append)

        base.set(4)

        assert times_ten() == 50
        assert seen == [50]

    def test_requires_a_source(self):
        with pytest.raises(ValueError):
            Computed(lambda: 1)


class TestEffect:
    """Tests for effects."""

    def test_runs_immediately_and_on_change(self):
        base = Signal(0)
        runs = []
        dispose = effect(lambda: runs.append(base()), base)

        base.set(1)
        dispose()
        base.set(2)

        assert runs == [0, 1]

    def test_effect_on_computed(self):
        first = Signal(1)
        second = Signal(2)
        total = Computed(lambda: first() + second(), first, second)
        runs = []
        effect(lambda: runs.append(total()), total)

        first.set(10)
        second.set(20)

        assert runs == [3, 12, 30]
