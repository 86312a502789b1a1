"""
Tests for warden/services/antinuke/gateway.py

End-to-end scoring flow: gateway -> director -> scorer -> notifier -> sink.
"""

from unittest.mock import MagicMock

import pytest

from warden.services.antinuke import AntiNukeGateway, EventType


def warn_messages(sink):
    return [c[0][1] for c in sink.warn.call_args_list]


def info_messages(sink):
    return [c[0][1] for c in sink.info.call_args_list]


# =============================================================================
# Scenario
# =============================================================================

class TestNukeScenario:
    """Two deletes inside the window trip the threshold once, then recover."""

    def test_full_cycle(self, gateway, sink, clock):
        assert gateway.status("g1").score == 0

        first = gateway.handle_event("g1", EventType.CHANNEL_DELETE)
        assert first.score == 0.5
        assert first.triggered is False
        sink.warn.assert_not_called()

        clock.advance(100)
        second = gateway.handle_event("g1", EventType.ROLE_DELETE)
        assert second.score == 1.0
        assert second.triggered is True
        assert warn_messages(sink) == ["AntiNuke threshold crossed"]

        clock.advance(1000)
        after = gateway.check("g1")
        assert after.score == 0
        assert after.triggered is False
        assert info_messages(sink).count("AntiNuke threshold cleared") == 1
        assert sink.warn.call_count == 1

    def test_sustained_attack_alerts_once(self, gateway, sink, clock):
        for _ in range(5):
            gateway.handle_event("g1", "channelDelete")
            clock.advance(10)
        assert sink.warn.call_count == 1

    def test_check_without_change_is_silent(self, gateway, sink):
        gateway.check("g1")
        gateway.check("g1")
        sink.warn.assert_not_called()
        sink.info.assert_not_called()


# =============================================================================
# Logging
# =============================================================================

class TestUpdateLog:
    """Every accepted event logs an update."""

    def test_update_payload(self, gateway, sink):
        gateway.handle_event("g1", EventType.CHANNEL_DELETE, channel="general")

        payload, message = sink.info.call_args_list[0][0]
        assert message == "AntiNuke updated"
        assert payload["evt"] == "channelDelete"
        assert payload["guildId"] == "g1"
        assert payload["channel"] == "general"
        assert payload["score"] == 0.5
        assert payload["triggered"] is False

    def test_none_guild_scored_under_unknown(self, gateway, director):
        gateway.handle_event(None, EventType.CHANNEL_DELETE)
        assert "unknown" in director
        assert gateway.status(None).score == 0.5

    def test_count_forwarded(self, gateway):
        assert gateway.handle_event("g1", EventType.ROLE_DELETE, 2).score == 1.0


# =============================================================================
# Error Boundary
# =============================================================================

class TestRejectedEvents:
    """Bad input is logged, never raised."""

    def test_unsupported_event_logged(self, gateway, sink):
        assert gateway.handle_event("g1", "guildBanAdd") is None

        payload, message = sink.error.call_args[0]
        assert message == "AntiNuke event rejected"
        assert payload["evt"] == "guildBanAdd"
        assert payload["type"] == "UnsupportedEventType"
        assert "channelDelete" in payload["error"]
        sink.info.assert_not_called()

    def test_negative_count_logged(self, gateway, sink):
        assert gateway.handle_event("g1", EventType.CHANNEL_DELETE, -1) is None
        assert sink.error.call_args[0][0]["type"] == "InvalidArgument"

    def test_state_unchanged_after_rejection(self, gateway):
        gateway.handle_event("g1", "bogus")
        assert gateway.status("g1").score == 0


# =============================================================================
# Disabled
# =============================================================================

class TestDisabled:
    """A disabled gateway ignores events."""

    def test_disabled_ignores_events(self, director, notifier):
        sink = MagicMock()
        gateway = AntiNukeGateway(director, notifier, sink, enabled=False)

        assert gateway.handle_event("g1", EventType.CHANNEL_DELETE) is None
        sink.info.assert_not_called()
        assert "g1" not in director
