"""Slack domain — Web API adapter, identity resolution and normalization."""

from __future__ import annotations

from slackbridge.slack.client import SlackClient
from slackbridge.slack.identity import IdentityResolver
from slackbridge.slack.normalize import chronological
from slackbridge.slack.normalize import iso_date
from slackbridge.slack.normalize import normalize_history_message
from slackbridge.slack.normalize import normalize_reply
from slackbridge.slack.normalize import normalize_search_match
from slackbridge.slack.normalize import normalize_thread_message
from slackbridge.slack.normalize import ts_value

__all__ = [
    "IdentityResolver",
    "SlackClient",
    "chronological",
    "iso_date",
    "normalize_history_message",
    "normalize_reply",
    "normalize_search_match",
    "normalize_thread_message",
    "ts_value",
]
