"""Pydantic models for the MCP tool surface.

Input models validate tool arguments; output models shape the JSON text
payloads.  Field order is the key order of the rendered payload, and
``None`` fields are dropped when rendering.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------


class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ReadMessagesArgs(_ToolArgs):
    """Arguments for ``slack_read_messages``."""

    channel_id: str | None = Field(
        default=None,
        description="The Slack channel ID. Defaults to configured inbox channel.",
    )
    days_back: float | None = Field(
        default=None,
        gt=0,
        description="Number of days of history to fetch. Default is 7.",
    )
    oldest: str | None = Field(
        default=None,
        description="Unix timestamp. If provided, only messages after this time are returned.",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of messages to return. Default 100.",
    )


class PostMessageArgs(_ToolArgs):
    """Arguments for ``slack_post_message``."""

    channel_id: str | None = None
    text: str = Field(min_length=1, description="The message text to post.")


class PostToThreadArgs(_ToolArgs):
    """Arguments for ``slack_post_to_thread``."""

    channel_id: str | None = None
    thread_ts: str = Field(
        min_length=1,
        description="The timestamp of the parent message to reply to.",
    )
    text: str = Field(min_length=1, description="The message text to post.")


class ReadThreadArgs(_ToolArgs):
    """Arguments for ``slack_read_thread``."""

    channel_id: str | None = None
    thread_ts: str = Field(
        min_length=1, description="The timestamp of the parent message."
    )


class WaitForReplyArgs(_ToolArgs):
    """Arguments for ``slack_wait_for_reply``."""

    channel_id: str | None = None
    thread_ts: str | None = Field(
        default=None,
        description=(
            "The timestamp of an existing thread to monitor. If not provided, "
            "message must be provided to start a new thread."
        ),
    )
    message: str | None = Field(
        default=None,
        description=(
            "Message to post (starts a new thread if thread_ts not provided, "
            "or posts to existing thread)."
        ),
    )
    poll_interval_seconds: int | float | None = Field(
        default=None,
        gt=0,
        description="Seconds between poll attempts. Default: 30",
    )
    timeout_minutes: int | float | None = Field(
        default=None,
        gt=0,
        description="Maximum minutes to wait for a reply. Default: 15",
    )


class GetFileArgs(_ToolArgs):
    """Arguments for ``slack_get_file``."""

    file_id: str = Field(min_length=1, description="The Slack file ID.")


class DownloadFileArgs(_ToolArgs):
    """Arguments for ``slack_download_file``."""

    file_id: str = Field(min_length=1, description="The Slack file ID to download.")
    save_path: str = Field(
        min_length=1,
        description="Local file path where the file should be saved.",
    )


class ListChannelsArgs(_ToolArgs):
    """Arguments for ``slack_list_channels``."""

    types: str | None = Field(
        default=None,
        description="Channel types to include: public_channel, private_channel.",
    )


class SearchMessagesArgs(_ToolArgs):
    """Arguments for ``slack_search_messages``."""

    query: str = Field(
        min_length=1,
        description="Search query (e.g., '#GenAI' or 'workshop idea').",
    )
    channel_id: str | None = Field(
        default=None, description="Limit search to specific channel."
    )


# ---------------------------------------------------------------------------
# Normalized messages
# ---------------------------------------------------------------------------


class FileSummary(BaseModel):
    """A file attached to a message."""

    id: str | None = None
    name: str | None = None
    mimetype: str | None = None
    size: int | None = None
    url_private: str | None = None


class HistoryMessage(BaseModel):
    """A channel-history message."""

    ts: str
    text: str | None = None
    user: str | None = None
    date: str
    thread_ts: str | None = None
    reply_count: int = 0
    files: list[FileSummary] | None = None


class ThreadMessage(BaseModel):
    """A thread message, flagged when authored by the bridge itself."""

    ts: str
    text: str | None = None
    user: str | None = None
    is_bot: bool = False
    date: str


class ReplyMessage(BaseModel):
    """The qualifying reply returned by a reply-wait."""

    ts: str
    text: str | None = None
    user: str | None = None
    date: str


class SearchMatch(BaseModel):
    """A history message matching a search query."""

    ts: str
    text: str | None = None
    date: str


class ChannelSummary(BaseModel):
    id: str | None = None
    name: str | None = None
    is_private: bool | None = None
    num_members: int | None = None


# ---------------------------------------------------------------------------
# Output models
# ---------------------------------------------------------------------------


class ReadMessagesResult(BaseModel):
    channel: str
    message_count: int
    messages: list[HistoryMessage] = Field(
        default_factory=list,
        description="Messages in chronological (oldest-first) order.",
    )


class PostMessageResult(BaseModel):
    success: bool = True
    channel: str | None = None
    ts: str | None = None
    message: str | None = None
    hint: str = (
        "Use the 'ts' value with slack_read_thread or slack_wait_for_reply "
        "to monitor for responses."
    )


class PostToThreadResult(BaseModel):
    success: bool = True
    channel: str | None = None
    ts: str | None = None
    thread_ts: str
    message: str | None = None


class ReadThreadResult(BaseModel):
    channel: str
    thread_ts: str
    reply_count: int
    messages: list[ThreadMessage] = Field(default_factory=list)


class ReplyReceivedResult(BaseModel):
    success: Literal[True] = True
    reply_received: Literal[True] = True
    channel: str
    thread_ts: str
    reply: ReplyMessage
    wait_duration_seconds: int


class ReplyNotReceivedResult(BaseModel):
    """Negative reply-wait outcome: timeout or cancellation."""

    success: Literal[False] = False
    reply_received: Literal[False] = False
    reason: Literal["timeout", "cancelled"]
    channel: str
    thread_ts: str
    timeout_minutes: int | float
    hint: str


class FileInfoResult(BaseModel):
    id: str | None = None
    name: str | None = None
    title: str | None = None
    mimetype: str | None = None
    size: int | None = None
    url_private: str | None = None
    url_private_download: str | None = None
    created: str | None = None
    user: str | None = None


class DownloadFileResult(BaseModel):
    success: bool = True
    file_name: str | None = None
    saved_to: str
    size: int


class ListChannelsResult(BaseModel):
    channel_count: int
    channels: list[ChannelSummary] = Field(default_factory=list)


class SearchMessagesResult(BaseModel):
    query: str
    channel: str
    match_count: int
    matches: list[SearchMatch] = Field(default_factory=list)
