"""Map raw Slack message records to the tool output models.

All functions are pure.  Slack timestamps (``"1712345678.000100"``) are
kept as strings and only parsed to derive dates or compare order.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from datetime import timedelta
from datetime import UTC

from slackbridge.models.schemas import FileSummary
from slackbridge.models.schemas import HistoryMessage
from slackbridge.models.schemas import ReplyMessage
from slackbridge.models.schemas import SearchMatch
from slackbridge.models.schemas import ThreadMessage

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def ts_value(ts: str | float | int) -> float:
    """Parse a Slack timestamp for ordering comparisons."""
    return float(ts)


def iso_date(ts: str | float | int) -> str:
    """Render seconds since the epoch as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Sub-millisecond precision is truncated.
    """
    millis = int(ts_value(ts) * 1000)
    moment = _EPOCH + timedelta(milliseconds=millis)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def summarize_files(raw: dict) -> list[FileSummary] | None:
    files = raw.get("files") or []
    if not files:
        return None
    return [
        FileSummary(
            id=f.get("id"),
            name=f.get("name"),
            mimetype=f.get("mimetype"),
            size=f.get("size"),
            url_private=f.get("url_private"),
        )
        for f in files
    ]


def normalize_history_message(raw: dict) -> HistoryMessage:
    return HistoryMessage(
        ts=raw["ts"],
        text=raw.get("text"),
        user=raw.get("user"),
        date=iso_date(raw["ts"]),
        thread_ts=raw.get("thread_ts"),
        reply_count=raw.get("reply_count") or 0,
        files=summarize_files(raw),
    )


def normalize_thread_message(raw: dict, self_id: str | None) -> ThreadMessage:
    """Normalize a thread message; ``is_bot`` is never set without a self ID."""
    user = raw.get("user")
    return ThreadMessage(
        ts=raw["ts"],
        text=raw.get("text"),
        user=user,
        is_bot=self_id is not None and user == self_id,
        date=iso_date(raw["ts"]),
    )


def normalize_reply(raw: dict) -> ReplyMessage:
    return ReplyMessage(
        ts=raw["ts"],
        text=raw.get("text"),
        user=raw.get("user"),
        date=iso_date(raw["ts"]),
    )


def normalize_search_match(raw: dict) -> SearchMatch:
    return SearchMatch(ts=raw["ts"], text=raw.get("text"), date=iso_date(raw["ts"]))


def chronological(messages: Sequence[HistoryMessage]) -> list[HistoryMessage]:
    """Reverse Slack's newest-first history into oldest-first order."""
    return list(reversed(messages))
