"""Slack bridge — FastMCP v2 server with nine Slack tools.

Tools are thin wrappers around ``ToolDispatcher``; each returns one text
payload (pretty JSON or ``Error: <message>``).  Call ``configure()``
before using the server, or run ``main()`` which loads the environment
and serves over stdio.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable
from collections.abc import Callable

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent

from slackbridge import __version__
from slackbridge.config import BridgeConfig
from slackbridge.config import get_log_level
from slackbridge.config import HistoryConfig
from slackbridge.config import load_bridge_config
from slackbridge.config import WaitConfig
from slackbridge.dispatch import ToolDispatcher
from slackbridge.engine import ReplyWaitEngine
from slackbridge.errors import MissingCredentialError
from slackbridge.slack import IdentityResolver
from slackbridge.slack import SlackClient

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "slack-bridge",
    instructions=(
        "Two-way bridge to Slack. Post messages, read channel history and "
        "threads, fetch files, and block on slack_wait_for_reply until a "
        "human answers in a thread."
    ),
)

# ---------------------------------------------------------------------------
# Composition root (set via configure())
# ---------------------------------------------------------------------------

_dispatcher: ToolDispatcher | None = None


async def configure(
    config: BridgeConfig | None = None,
    *,
    client: SlackClient | None = None,
    history_config: HistoryConfig | None = None,
    wait_config: WaitConfig | None = None,
    clock: Callable[[], float] | None = None,
    sleep: Callable[[float], Awaitable[None]] | None = None,
    now: Callable[[], float] | None = None,
) -> ToolDispatcher:
    """Build the Slack client, identity resolver, engine and dispatcher.

    ``config`` defaults to ``load_bridge_config()``.  ``client``,
    ``clock``, ``sleep`` and ``now`` exist so tests can run the tools
    against a fake Slack and a fake clock.
    """
    global _dispatcher
    if _dispatcher is not None:
        _dispatcher.cancel_active_waits()

    cfg = config or load_bridge_config()
    slack = client or SlackClient(cfg.bot_token)
    identity = IdentityResolver(slack)

    engine_kwargs: dict = {}
    if clock is not None:
        engine_kwargs["clock"] = clock
    if sleep is not None:
        engine_kwargs["sleep"] = sleep
    engine = ReplyWaitEngine(slack, identity, **engine_kwargs)

    dispatcher_kwargs: dict = {}
    if now is not None:
        dispatcher_kwargs["now"] = now
    _dispatcher = ToolDispatcher(
        slack,
        identity,
        engine,
        cfg,
        history_config=history_config,
        wait_config=wait_config,
        **dispatcher_kwargs,
    )
    return _dispatcher


async def shutdown() -> None:
    """Cancel in-flight reply waits and release the dispatcher."""
    global _dispatcher
    if _dispatcher is not None:
        cancelled = _dispatcher.cancel_active_waits()
        if cancelled:
            logger.info("Cancelled %d in-flight reply wait(s)", cancelled)
        _dispatcher = None


async def _call(name: str, arguments: dict) -> str:
    """Dispatch one tool call; omitted arguments are left to the arg model."""
    if _dispatcher is None:
        return "Error: Slack bridge not configured. Call configure() first."
    supplied = {key: value for key, value in arguments.items() if value is not None}
    result = await _dispatcher.dispatch(name, supplied)
    return result.render()


class ToolCallBoundary(Middleware):
    """Answer calls to unregistered tool names with a text payload.

    FastMCP would otherwise fail the request itself; the dispatcher owns
    the ``Unknown tool: <name>`` reply.
    """

    async def on_call_tool(self, context, call_next):
        name = context.message.name
        if _dispatcher is not None and name in _dispatcher.tool_names:
            return await call_next(context)
        text = await _call(name, dict(context.message.arguments or {}))
        return ToolResult(content=[TextContent(type="text", text=text)])


mcp.add_middleware(ToolCallBoundary())


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool
async def slack_read_messages(
    channel_id: str | None = None,
    days_back: float | None = None,
    oldest: str | None = None,
    limit: int | None = None,
) -> str:
    """Read messages from a Slack channel.

    Returns messages from the last N days or since a specific timestamp,
    oldest first. Use this to pull captured content from the inbox.

    Args:
        channel_id: The Slack channel ID. Defaults to configured inbox channel.
        days_back: Number of days of history to fetch. Default is 7.
        oldest: Unix timestamp. If provided, only messages after this time are returned.
        limit: Maximum number of messages to return. Default 100.
    """
    return await _call(
        "slack_read_messages",
        {"channel_id": channel_id, "days_back": days_back, "oldest": oldest, "limit": limit},
    )


@mcp.tool
async def slack_post_message(
    text: str | None = None, channel_id: str | None = None
) -> str:
    """Post a message to a Slack channel.

    Returns the message timestamp (ts) which can be used to read thread
    replies later.

    Args:
        text: The message text to post.
        channel_id: The Slack channel ID. Defaults to configured inbox channel.
    """
    return await _call("slack_post_message", {"channel_id": channel_id, "text": text})


@mcp.tool
async def slack_post_to_thread(
    thread_ts: str | None = None,
    text: str | None = None,
    channel_id: str | None = None,
) -> str:
    """Post a reply to an existing message thread.

    Args:
        thread_ts: The timestamp of the parent message to reply to.
        text: The message text to post.
        channel_id: The Slack channel ID. Defaults to configured inbox channel.
    """
    return await _call(
        "slack_post_to_thread",
        {"channel_id": channel_id, "thread_ts": thread_ts, "text": text},
    )


@mcp.tool
async def slack_read_thread(
    thread_ts: str | None = None, channel_id: str | None = None
) -> str:
    """Read all replies in a message thread.

    Use this to check for user responses to a message you posted.

    Args:
        thread_ts: The timestamp of the parent message.
        channel_id: The Slack channel ID. Defaults to configured inbox channel.
    """
    return await _call(
        "slack_read_thread", {"channel_id": channel_id, "thread_ts": thread_ts}
    )


@mcp.tool
async def slack_wait_for_reply(
    channel_id: str | None = None,
    thread_ts: str | None = None,
    message: str | None = None,
    poll_interval_seconds: int | float | None = None,
    timeout_minutes: int | float | None = None,
) -> str:
    """Poll a thread waiting for a user reply.

    Posts an initial message if provided, then polls until a non-bot reply
    appears or timeout is reached. Use this when you need to ask the user
    a question and wait for their response via Slack.

    Args:
        channel_id: The Slack channel ID. Defaults to configured inbox channel.
        thread_ts: Timestamp of an existing thread to monitor. If not provided,
            message must be provided to start a new thread.
        message: Message to post (starts a new thread if thread_ts not
            provided, or posts to existing thread).
        poll_interval_seconds: Seconds between poll attempts. Default: 30
        timeout_minutes: Maximum minutes to wait for a reply. Default: 15
    """
    return await _call(
        "slack_wait_for_reply",
        {
            "channel_id": channel_id,
            "thread_ts": thread_ts,
            "message": message,
            "poll_interval_seconds": poll_interval_seconds,
            "timeout_minutes": timeout_minutes,
        },
    )


@mcp.tool
async def slack_get_file(file_id: str | None = None) -> str:
    """Get information about a file shared in Slack, including download URL.

    Use this to retrieve voice notes and documents.

    Args:
        file_id: The Slack file ID.
    """
    return await _call("slack_get_file", {"file_id": file_id})


@mcp.tool
async def slack_download_file(
    file_id: str | None = None, save_path: str | None = None
) -> str:
    """Download a file from Slack and save it to the specified path.

    Args:
        file_id: The Slack file ID to download.
        save_path: Local file path where the file should be saved.
    """
    return await _call(
        "slack_download_file", {"file_id": file_id, "save_path": save_path}
    )


@mcp.tool
async def slack_list_channels(types: str | None = None) -> str:
    """List available Slack channels. Use this to find channel IDs.

    Args:
        types: Channel types to include: public_channel, private_channel.
            Default: public_channel,private_channel
    """
    return await _call("slack_list_channels", {"types": types})


@mcp.tool
async def slack_search_messages(
    query: str | None = None, channel_id: str | None = None
) -> str:
    """Search for messages containing specific text or hashtags.

    Args:
        query: Search query (e.g., '#GenAI' or 'workshop idea').
        channel_id: Limit search to specific channel.
    """
    return await _call(
        "slack_search_messages", {"query": query, "channel_id": channel_id}
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def _serve(config: BridgeConfig) -> None:
    await configure(config)
    logger.info("Slack bridge MCP server v%s running", __version__)
    try:
        await mcp.run_async(transport="stdio")
    finally:
        await shutdown()


def main() -> None:
    """Load ``.env`` and the environment, then serve MCP over stdio."""
    load_dotenv(override=False)
    # stdout carries the MCP stream; logs go to stderr.
    logging.basicConfig(
        level=get_log_level(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_bridge_config()
    except MissingCredentialError as exc:
        logger.error("Error: %s", exc)
        sys.exit(1)
    asyncio.run(_serve(config))


if __name__ == "__main__":
    main()
