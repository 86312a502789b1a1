"""
Tests for warden/services/antinuke/service.py

Covers weighted scoring, the inclusive threshold, unsupported events,
expiry of the score, and the outbound status shape.
"""

import math

import pytest

from warden.services.antinuke import (
    DEFAULT_CONFIG,
    DEFAULT_SCORE_PER_EVENT,
    EventType,
    InvalidArgument,
    ScoringConfig,
    ScoringService,
    SlidingWindowCounter,
    UnsupportedEventType,
)


# =============================================================================
# Weighted Scoring
# =============================================================================

class TestWeightedScoring:
    """Score is the weighted sum of windowed counts."""

    def test_baseline_is_zero(self, two_event_config, clock):
        status = ScoringService(two_event_config, now=clock).status()
        assert status.score == 0
        assert status.triggered is False

    def test_single_event_below_threshold(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        service.record("channelDelete", 1)
        status = service.status()
        assert status.score == 0.5
        assert status.triggered is False

    def test_threshold_is_inclusive(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        service.record("channelDelete", 1)
        service.record("roleDelete", 1)
        status = service.status()
        assert status.score == 1.0
        assert status.triggered is True

    def test_per_event_contributions(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        service.record(EventType.CHANNEL_DELETE, 3)
        status = service.status()
        assert status.counts == {"channelDelete": 3, "roleDelete": 0}
        assert status.per_event == {"channelDelete": 1.5, "roleDelete": 0}

    def test_fractional_counts(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        service.record("roleDelete", 0.5)
        assert service.status().score == 0.25

    def test_zero_threshold_always_triggered(self, clock):
        config = ScoringConfig(window_ms=500, threshold=0, score_per_event={"roleDelete": 1})
        assert ScoringService(config, now=clock).status().triggered is True

    def test_zero_weight_event_is_supported(self, clock):
        config = ScoringConfig(window_ms=500, threshold=1, score_per_event={"guildUpdate": 0})
        service = ScoringService(config, now=clock)
        service.record("guildUpdate", 10)
        status = service.status()
        assert status.counts["guildUpdate"] == 10
        assert status.score == 0


# =============================================================================
# Expiry
# =============================================================================

class TestScoreExpiry:
    """Score is recomputed on every status() call."""

    def test_score_drops_after_window(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        service.record("channelDelete")
        service.record("roleDelete")
        assert service.status().triggered is True

        clock.advance(1000)
        status = service.status()
        assert status.score == 0
        assert status.triggered is False

    def test_status_reports_clock_and_window(self, two_event_config, clock):
        clock.now = 1234
        status = ScoringService(two_event_config, now=clock).status()
        assert status.ts == 1234
        assert status.window_ms == 500
        assert status.threshold == 1.0


# =============================================================================
# Unsupported Events
# =============================================================================

class TestUnsupportedEvents:
    """Recording outside the weight table fails loudly."""

    def test_unknown_event_rejected(self):
        service = ScoringService(DEFAULT_CONFIG)
        with pytest.raises(UnsupportedEventType) as exc_info:
            service.record("notARealEvent", 1)

        err = exc_info.value
        assert err.event_type == "notARealEvent"
        assert err.supported == [e.value for e in DEFAULT_SCORE_PER_EVENT]
        assert "channelDelete" in str(err)

    def test_known_event_outside_table_rejected(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        with pytest.raises(UnsupportedEventType) as exc_info:
            service.record(EventType.GUILD_BAN_ADD)
        assert exc_info.value.supported == ["channelDelete", "roleDelete"]

    def test_rejected_event_not_counted(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        with pytest.raises(UnsupportedEventType):
            service.record("guildBanAdd")
        assert service.status().score == 0

    def test_supported_events_in_table_order(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        assert service.supported_events() == [EventType.CHANNEL_DELETE, EventType.ROLE_DELETE]

    def test_negative_count_rejected(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        with pytest.raises(InvalidArgument):
            service.record("channelDelete", -1)


# =============================================================================
# Simulate
# =============================================================================

class TestSimulate:
    """simulate() is record() followed by status()."""

    def test_simulate_returns_status(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        status = service.simulate("channelDelete", 2)
        assert status.score == 1.0
        assert status.triggered is True

    def test_simulate_persists(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        service.simulate("channelDelete")
        assert service.status().counts["channelDelete"] == 1


# =============================================================================
# Configuration
# =============================================================================

class TestScoringConfig:
    """ScoringConfig validation."""

    def test_defaults(self):
        assert DEFAULT_CONFIG.window_ms == 30_000
        assert DEFAULT_CONFIG.threshold == 1.0
        assert DEFAULT_CONFIG.score_per_event[EventType.CHANNEL_DELETE] == 0.5
        assert DEFAULT_CONFIG.score_per_event[EventType.GUILD_UPDATE] == 0.1
        assert DEFAULT_CONFIG.score_per_event[EventType.CHANNEL_UPDATE] == 0.2
        assert len(DEFAULT_CONFIG.score_per_event) == len(EventType)

    def test_string_keys_parsed(self):
        config = ScoringConfig(score_per_event={"roleDelete": 2})
        assert config.score_per_event == {EventType.ROLE_DELETE: 2.0}

    def test_unknown_key_rejected(self):
        with pytest.raises(UnsupportedEventType):
            ScoringConfig(score_per_event={"nukeEverything": 1})

    @pytest.mark.parametrize("threshold", [-0.1, math.inf, math.nan])
    def test_bad_threshold_rejected(self, threshold):
        with pytest.raises(InvalidArgument):
            ScoringConfig(threshold=threshold)

    def test_negative_weight_rejected(self):
        with pytest.raises(InvalidArgument):
            ScoringConfig(score_per_event={"roleDelete": -1})

    def test_weights_read_only(self):
        config = ScoringConfig(score_per_event={"roleDelete": 1})
        with pytest.raises(TypeError):
            config.score_per_event[EventType.ROLE_DELETE] = 0
        assert config.score_per_event[EventType.ROLE_DELETE] == 1

    def test_caller_dict_not_aliased(self):
        weights = {EventType.ROLE_DELETE: 1.0}
        config = ScoringConfig(score_per_event=weights)
        weights[EventType.ROLE_DELETE] = 9.0
        assert config.score_per_event[EventType.ROLE_DELETE] == 1.0

    def test_injected_counter_used(self, two_event_config, clock):
        counter = SlidingWindowCounter(500, now=clock)
        service = ScoringService(two_event_config, counter=counter, now=clock)
        service.record("roleDelete")
        assert counter.count("roleDelete") == 1


# =============================================================================
# Status Shape
# =============================================================================

class TestStatusDict:
    """to_dict() keeps the camelCase outbound contract."""

    def test_keys(self, two_event_config, clock):
        service = ScoringService(two_event_config, now=clock)
        service.record("channelDelete")
        data = service.status().to_dict()
        assert set(data) == {"ts", "windowMs", "counts", "perEvent", "score", "threshold", "triggered"}
        assert data["windowMs"] == 500
        assert data["perEvent"]["channelDelete"] == 0.5
        assert data["triggered"] is False
