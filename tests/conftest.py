"""
Warden - Test Fixtures
======================

Shared fixtures for all tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep log files out of the working tree
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="warden-logs-"))

from warden.services.antinuke import (  # noqa: E402
    AntiNukeDirector,
    AntiNukeGateway,
    EventType,
    ScoringConfig,
    ThresholdNotifier,
)


# =============================================================================
# Clock
# =============================================================================

class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    """Clock starting at t=0."""
    return FakeClock()


# =============================================================================
# Scoring Fixtures
# =============================================================================

@pytest.fixture
def two_event_config():
    """Window 500ms, threshold 1.0, channel/role deletes at 0.5 each."""
    return ScoringConfig(
        window_ms=500,
        threshold=1.0,
        score_per_event={
            EventType.CHANNEL_DELETE: 0.5,
            EventType.ROLE_DELETE: 0.5,
        },
    )


@pytest.fixture
def director(two_event_config, clock):
    """Director without overrides, on the fake clock."""
    return AntiNukeDirector(base_config=two_event_config, now=clock)


@pytest.fixture
def notifier():
    return ThresholdNotifier()


@pytest.fixture
def sink():
    """Notification sink recording info/warn/error calls."""
    return MagicMock()


@pytest.fixture
def gateway(director, notifier, sink):
    return AntiNukeGateway(director=director, notifier=notifier, sink=sink)

