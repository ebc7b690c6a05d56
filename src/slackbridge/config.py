"""Application configuration dataclasses and environment helpers.

Frozen dataclasses with sensible defaults for each subsystem.  Only the
credential and default channel come from the environment; everything
else can be overridden at construction time.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from slackbridge.errors import MissingCredentialError


@dataclass(frozen=True)
class BridgeConfig:
    """Slack credential and default channel, loaded once at startup."""

    bot_token: str
    default_channel: str | None = None

    def resolve_channel(self, channel_id: str | None) -> str | None:
        """Return the explicit channel, else the default, else ``None``."""
        return channel_id or self.default_channel or None


@dataclass(frozen=True)
class WaitConfig:
    """Defaults for ``slack_wait_for_reply``."""

    poll_interval_seconds: float = 30
    timeout_minutes: float = 15


@dataclass(frozen=True)
class HistoryConfig:
    """Defaults for history reads, search and channel listing."""

    days_back: float = 7
    limit: int = 100
    search_scan_limit: int = 200
    channel_types: str = "public_channel,private_channel"


def _stripped_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def get_slack_bot_token() -> str | None:
    """Get the Slack bot token from ``SLACK_BOT_TOKEN``."""
    return _stripped_env("SLACK_BOT_TOKEN")


def get_default_channel() -> str | None:
    """Get the default channel ID from ``SLACK_CHANNEL_ID``."""
    return _stripped_env("SLACK_CHANNEL_ID")


def get_log_level() -> int:
    """Get the log level from ``SLACK_BRIDGE_LOG_LEVEL`` (default INFO)."""
    raw = (_stripped_env("SLACK_BRIDGE_LOG_LEVEL") or "INFO").upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def load_bridge_config() -> BridgeConfig:
    """Build a ``BridgeConfig`` from the environment.

    Raises ``MissingCredentialError`` when no bot token is configured.
    """
    token = get_slack_bot_token()
    if token is None:
        raise MissingCredentialError()
    return BridgeConfig(bot_token=token, default_channel=get_default_channel())
