"""
Tests for warden/services/antinuke/window.py

Covers window expiry at the boundary, per-label sums, snapshots read
against a single timestamp, and argument validation.
"""

import math

import pytest

from warden.services.antinuke import InvalidArgument, SlidingWindowCounter


# =============================================================================
# Expiry
# =============================================================================

class TestWindowExpiry:
    """Entries only count while strictly inside the window."""

    def test_counted_just_before_boundary(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 1)
        clock.now = 499
        assert counter.count("x") == 1

    def test_excluded_exactly_at_boundary(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 1)
        clock.now = 500
        assert counter.count("x") == 0

    def test_excluded_after_boundary(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 1)
        clock.now = 501
        assert counter.count("x") == 0

    def test_expired_entries_never_return(self, clock):
        """Once pruned, an entry stays gone even if the clock moves back."""
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 1)
        clock.now = 600
        assert counter.count("x") == 0
        clock.now = 100
        assert counter.count("x") == 0

    def test_out_of_order_entry_expires(self, clock):
        """An old entry queued behind a newer one still leaves the window."""
        counter = SlidingWindowCounter(500, now=clock)
        clock.now = 1000
        counter.increment("x", 1)
        clock.now = 0  # clock stepped backwards
        counter.increment("x", 1)
        clock.now = 1400
        assert counter.count("x") == 1
        assert counter.snapshot(["x"]).counts == {"x": 1}

    def test_only_old_entries_expire(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 2)
        clock.advance(300)
        counter.increment("x", 3)
        clock.advance(300)  # t=600: first entry gone, second still inside
        assert counter.count("x") == 3


# =============================================================================
# Counting
# =============================================================================

class TestCounting:
    """Tests for increment/count."""

    def test_unseen_label_is_zero(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        assert counter.count("never") == 0

    def test_amounts_are_summed(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 1)
        counter.increment("x", 2.5)
        assert counter.count("x") == 3.5

    def test_labels_are_independent(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("a", 1)
        counter.increment("b", 4)
        assert counter.count("a") == 1
        assert counter.count("b") == 4

    def test_default_amount_is_one(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x")
        assert counter.count("x") == 1

    def test_zero_amount_accepted(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 0)
        assert counter.count("x") == 0

    def test_labels_lists_active_only(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("a")
        clock.advance(400)
        counter.increment("b")
        clock.advance(200)
        assert counter.labels() == ["b"]

    def test_clear(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("x", 5)
        counter.clear()
        assert counter.count("x") == 0


# =============================================================================
# Snapshot
# =============================================================================

class TestSnapshot:
    """snapshot() reads every label at the same instant."""

    def test_snapshot_fields(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        counter.increment("a", 2)
        clock.now = 10
        snap = counter.snapshot(["a", "b"])
        assert snap.ts == 10
        assert snap.window_ms == 500
        assert snap.counts == {"a": 2, "b": 0}

    def test_single_clock_read(self):
        """A clock that moves on every call must only be read once."""
        ticks = iter(range(0, 10_000, 400))
        counter = SlidingWindowCounter(500, now=lambda: next(ticks))
        counter.increment("a")  # t=0
        counter.increment("b")  # t=400
        snap = counter.snapshot(["a", "b"])  # t=800 for both labels
        assert snap.ts == 800
        assert snap.counts == {"a": 0, "b": 1}


# =============================================================================
# Validation
# =============================================================================

class TestValidation:
    """Invalid amounts and windows raise InvalidArgument."""

    @pytest.mark.parametrize("amount", [-1, math.inf, math.nan, "3", None, True])
    def test_bad_amount_rejected(self, clock, amount):
        counter = SlidingWindowCounter(500, now=clock)
        with pytest.raises(InvalidArgument):
            counter.increment("x", amount)
        assert counter.count("x") == 0

    @pytest.mark.parametrize("window", [0, -5, math.inf])
    def test_bad_window_rejected(self, window):
        with pytest.raises(InvalidArgument):
            SlidingWindowCounter(window)

    def test_invalid_argument_is_value_error(self, clock):
        counter = SlidingWindowCounter(500, now=clock)
        with pytest.raises(ValueError):
            counter.increment("x", -1)

    def test_default_clock_is_wall_time(self):
        counter = SlidingWindowCounter(60_000)
        counter.increment("x")
        assert counter.count("x") == 1
