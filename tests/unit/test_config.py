"""Unit tests for configuration dataclasses and environment helpers."""

import logging
from dataclasses import FrozenInstanceError

import pytest

from slackbridge.config import BridgeConfig
from slackbridge.config import get_default_channel
from slackbridge.config import get_log_level
from slackbridge.config import get_slack_bot_token
from slackbridge.config import HistoryConfig
from slackbridge.config import load_bridge_config
from slackbridge.config import WaitConfig
from slackbridge.errors import MissingCredentialError


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestWaitConfig:
    def test_defaults(self):
        cfg = WaitConfig()
        assert cfg.poll_interval_seconds == 30
        assert cfg.timeout_minutes == 15


class TestHistoryConfig:
    def test_defaults(self):
        cfg = HistoryConfig()
        assert cfg.days_back == 7
        assert cfg.limit == 100
        assert cfg.search_scan_limit == 200
        assert cfg.channel_types == "public_channel,private_channel"


class TestBridgeConfig:
    def test_explicit_channel_wins(self):
        cfg = BridgeConfig(bot_token="xoxb", default_channel="CDEFAULT")
        assert cfg.resolve_channel("CEXPLICIT") == "CEXPLICIT"

    def test_falls_back_to_default(self):
        cfg = BridgeConfig(bot_token="xoxb", default_channel="CDEFAULT")
        assert cfg.resolve_channel(None) == "CDEFAULT"
        assert cfg.resolve_channel("") == "CDEFAULT"

    def test_no_channel_available(self):
        cfg = BridgeConfig(bot_token="xoxb")
        assert cfg.resolve_channel(None) is None


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


class TestEnvironment:
    def test_token_from_env(self, monkeypatch):
        monkeypatch.setenv("SLACK_BOT_TOKEN", "  xoxb-env  ")
        assert get_slack_bot_token() == "xoxb-env"

    def test_blank_token_is_missing(self, monkeypatch):
        monkeypatch.setenv("SLACK_BOT_TOKEN", "   ")
        assert get_slack_bot_token() is None

    def test_default_channel_optional(self, monkeypatch):
        monkeypatch.delenv("SLACK_CHANNEL_ID", raising=False)
        assert get_default_channel() is None

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("SLACK_BRIDGE_LOG_LEVEL", "debug")
        assert get_log_level() == logging.DEBUG

    def test_unknown_log_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("SLACK_BRIDGE_LOG_LEVEL", "chatty")
        assert get_log_level() == logging.INFO

    def test_load_bridge_config(self, monkeypatch):
        monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-env")
        monkeypatch.setenv("SLACK_CHANNEL_ID", "C123")
        cfg = load_bridge_config()
        assert cfg == BridgeConfig(bot_token="xoxb-env", default_channel="C123")

    def test_load_bridge_config_requires_token(self, monkeypatch):
        monkeypatch.delenv("SLACK_BOT_TOKEN", raising=False)
        with pytest.raises(MissingCredentialError, match="SLACK_BOT_TOKEN"):
            load_bridge_config()


# ---------------------------------------------------------------------------
# Immutability
# ---------------------------------------------------------------------------


class TestConfigImmutability:
    def test_bridge_config_frozen(self):
        cfg = BridgeConfig(bot_token="xoxb")
        with pytest.raises(FrozenInstanceError):
            cfg.default_channel = "C1"

    def test_wait_config_frozen(self):
        cfg = WaitConfig()
        with pytest.raises(FrozenInstanceError):
            cfg.timeout_minutes = 1

    def test_history_config_frozen(self):
        cfg = HistoryConfig()
        with pytest.raises(FrozenInstanceError):
            cfg.limit = 5
