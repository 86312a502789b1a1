"""
Warden - Logger Module
======================

Tree-style logging with Eastern timestamps and daily log files.

DESIGN:
    Structured data is printed as a title followed by indented key/value
    rows, which keeps multi-field security events readable in a terminal
    and in the log files.

    Key features:
    - Tree-style formatting for structured data
    - Eastern timezone timestamps (auto EST/EDT handling)
    - Daily log files in dated folders, with a separate error file
    - 7-day log retention with cleanup on startup
    - Session run id in every session header
    - Optional Discord webhook for errors with details

    TreeLogSink adapts the logger to the (payload, message) sink interface
    used by the anti-nuke notifier and gateway.
"""

import asyncio
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

import aiohttp


# =============================================================================
# Constants
# =============================================================================

LOGS_DIR = Path(os.getenv("LOG_DIR", "logs"))
"""Directory for all log files, organized by date."""

LOG_RETENTION_DAYS = 7
"""Number of days to retain log directories before cleanup."""

NY_TZ = ZoneInfo("America/New_York")
"""Eastern timezone for consistent timestamps."""

Details = List[Tuple[str, str]]


# =============================================================================
# Tree Logger Class
# =============================================================================

class TreeLogger:
    """
    Logger with tree-style formatting and Eastern timezone support.

    Attributes:
        run_id: Unique identifier for this bot session.
        log_file: Path to the main log file.
        error_file: Path to the error-only log file.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, logs_dir: Path = LOGS_DIR, name: str = "Warden") -> None:
        """
        Create today's log directory, clean up old ones and write the
        session header.
        """
        self.run_id: str = str(uuid.uuid4())[:8]
        self._webhook_url: Optional[str] = None
        self._name = name
        self._logs_dir = logs_dir

        today = datetime.now(NY_TZ).strftime("%Y-%m-%d")
        self.log_dir = logs_dir / today
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / f"{name}-{today}.log"
        self.error_file = self.log_dir / f"{name}-Errors-{today}.log"

        self._cleanup_old_logs()
        self._write_session_header()

    def set_webhook(self, url: Optional[str]) -> None:
        """Set webhook URL for error notifications."""
        self._webhook_url = url

    # =========================================================================
    # Log Cleanup
    # =========================================================================

    def _cleanup_old_logs(self) -> None:
        """
        Remove log directories older than the retention period.

        Only directories named YYYY-MM-DD are considered.
        """
        now = datetime.now()
        deleted = 0

        for item in self._logs_dir.iterdir():
            if not item.is_dir():
                continue
            try:
                dir_date = datetime.strptime(item.name, "%Y-%m-%d")
            except ValueError:
                continue  # Not a dated folder

            if (now - dir_date).days > LOG_RETENTION_DAYS:
                for f in item.iterdir():
                    f.unlink()
                item.rmdir()
                deleted += 1

        if deleted > 0:
            print(f"[LOG CLEANUP] Removed {deleted} old log directories")

    def _write_session_header(self) -> None:
        header = f"""
============================================================
NEW SESSION - RUN ID: {self.run_id}
[{datetime.now(NY_TZ).strftime("%I:%M:%S %p %Z")}]
============================================================
"""
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(header)

    # =========================================================================
    # Core Logging
    # =========================================================================

    def _get_timestamp(self) -> str:
        """Timestamp like "[02:30:45 PM EST]"."""
        return datetime.now(NY_TZ).strftime("[%I:%M:%S %p %Z]")

    def _write(
        self,
        message: str,
        emoji: str = "",
        include_timestamp: bool = True,
        is_error: bool = False,
    ) -> None:
        """
        Write a line to the console and the main log file.

        Args:
            message: Log message content.
            emoji: Optional emoji prefix.
            include_timestamp: Whether to prepend the timestamp.
            is_error: Whether to also write to the error log.
        """
        if include_timestamp:
            timestamp = self._get_timestamp()
            full_message = f"{timestamp} {emoji} {message}" if emoji else f"{timestamp} {message}"
        else:
            full_message = f"{emoji} {message}" if emoji else message

        print(full_message)

        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(f"{full_message}\n")

        if is_error:
            with open(self.error_file, "a", encoding="utf-8") as f:
                f.write(f"{full_message}\n")

    def _write_items(self, items: Details, is_error: bool = False) -> None:
        for i, (key, value) in enumerate(items):
            prefix = "└─" if i == len(items) - 1 else "├─"
            self._write(f"  {prefix} {key}: {value}", include_timestamp=False, is_error=is_error)

    # =========================================================================
    # Tree Formatting
    # =========================================================================

    def tree(
        self,
        title: str,
        items: Details,
        emoji: str = "📦",
        is_error: bool = False,
    ) -> None:
        """
        Log structured data in tree format.

        Example output:
            [02:30:45 PM EST] 🛡️ AntiNuke threshold crossed
              ├─ Guild: 123456789012345678
              ├─ Score: 1.0
              └─ Threshold: 1.0
        """
        self._write(title, emoji=emoji, is_error=is_error)
        self._write_items(items, is_error=is_error)

    # =========================================================================
    # Log Levels
    # =========================================================================

    def debug(self, msg: str, details: Optional[Details] = None) -> None:
        """Log debug message (only if DEBUG env var set)."""
        if os.getenv("DEBUG"):
            self.tree(msg, details or [], emoji="🔍")

    def info(self, msg: str, details: Optional[Details] = None) -> None:
        self.tree(msg, details or [], emoji="ℹ️")

    def success(self, msg: str, details: Optional[Details] = None) -> None:
        self.tree(msg, details or [], emoji="✅")

    def warning(self, msg: str, details: Optional[Details] = None) -> None:
        self.tree(msg, details or [], emoji="⚠️")

    def error(self, msg: str, details: Optional[Details] = None) -> None:
        """
        Log error message with optional structured details.

        Errors with details are also sent to the webhook, if configured.
        """
        self.tree(msg, details or [], emoji="❌", is_error=True)

        if details and self._webhook_url:
            try:
                asyncio.get_running_loop().create_task(self._send_webhook_error(msg, details))
            except RuntimeError:
                pass  # No running loop (startup or tests)

    def critical(self, msg: str, details: Optional[Details] = None) -> None:
        self.tree(msg, details or [], emoji="🚨", is_error=True)

    # =========================================================================
    # Webhook Integration
    # =========================================================================

    async def _send_webhook_error(self, title: str, details: Details) -> None:
        """Send an error embed to the Discord webhook."""
        if not self._webhook_url:
            return

        try:
            description = "\n".join([f"**{k}:** {v}" for k, v in details])
            payload = {
                "embeds": [{
                    "title": f"❌ {title}",
                    "description": description[:4000],
                    "color": 0xDC3545,
                    "timestamp": datetime.now(NY_TZ).isoformat(),
                    "footer": {"text": f"Run ID: {self.run_id}"},
                }]
            }

            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=10),
                ) as resp:
                    if resp.status != 204:
                        print(f"Webhook error: {resp.status}")

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Failed to send webhook: {e}")


# =============================================================================
# Notification Sink
# =============================================================================

def format_value(value: Any) -> str:
    """Render a payload value for a tree row."""
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, Mapping):
        inner = ", ".join(f"{k}={format_value(v)}" for k, v in value.items() if v)
        return inner or "-"
    return str(value)


def payload_items(payload: Mapping[str, Any]) -> Details:
    """Turn a structured payload into tree rows, skipping None values."""
    return [(key, format_value(value)) for key, value in payload.items() if value is not None]


class TreeLogSink:
    """
    Notification sink writing (payload, message) events through a TreeLogger.

    DESIGN:
        The anti-nuke notifier and gateway only know the sink interface
        (info/warn/error taking a payload and a message), so tests can pass
        a MagicMock and production passes this adapter.
    """

    def __init__(self, tree_logger: TreeLogger) -> None:
        self._logger = tree_logger

    def info(self, payload: Mapping[str, Any], message: str) -> None:
        self._logger.tree(message, payload_items(payload), emoji="🛡️")

    def warn(self, payload: Mapping[str, Any], message: str) -> None:
        self._logger.warning(message, payload_items(payload))

    def error(self, payload: Mapping[str, Any], message: str) -> None:
        self._logger.error(message, payload_items(payload))


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger()
"""
Global logger instance for use throughout the application.

DESIGN:
    Single instance created at module import time.
    All modules import and use this same instance.
"""


__all__ = [
    "logger",
    "TreeLogger",
    "TreeLogSink",
    "NY_TZ",
    "format_value",
    "payload_items",
]
