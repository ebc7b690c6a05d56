"""Tool dispatcher — the single fault-to-text boundary.

Maps each tool name to an argument model and a handler.  Handlers raise;
``dispatch()`` turns every exception into an ``Error: <message>`` result
so the MCP transport never sees a failed call.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError

from slackbridge.config import BridgeConfig
from slackbridge.config import HistoryConfig
from slackbridge.config import WaitConfig
from slackbridge.engine import CancelToken
from slackbridge.engine import ReplyWaitEngine
from slackbridge.engine import WaitRequest
from slackbridge.engine import WaitState
from slackbridge.errors import BridgeError
from slackbridge.errors import DownloadError
from slackbridge.errors import DownloadUnavailableError
from slackbridge.errors import MissingChannelError
from slackbridge.models import ChannelSummary
from slackbridge.models import DownloadFileArgs
from slackbridge.models import DownloadFileResult
from slackbridge.models import FileInfoResult
from slackbridge.models import GetFileArgs
from slackbridge.models import ListChannelsArgs
from slackbridge.models import ListChannelsResult
from slackbridge.models import PostMessageArgs
from slackbridge.models import PostMessageResult
from slackbridge.models import PostToThreadArgs
from slackbridge.models import PostToThreadResult
from slackbridge.models import ReadMessagesArgs
from slackbridge.models import ReadMessagesResult
from slackbridge.models import ReadThreadArgs
from slackbridge.models import ReadThreadResult
from slackbridge.models import ReplyNotReceivedResult
from slackbridge.models import ReplyReceivedResult
from slackbridge.models import SearchMessagesArgs
from slackbridge.models import SearchMessagesResult
from slackbridge.models import WaitForReplyArgs
from slackbridge.observability import record_latency
from slackbridge.slack import chronological
from slackbridge.slack import IdentityResolver
from slackbridge.slack import iso_date
from slackbridge.slack import normalize_history_message
from slackbridge.slack import normalize_reply
from slackbridge.slack import normalize_search_match
from slackbridge.slack import normalize_thread_message
from slackbridge.slack import SlackClient

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60
_TIMEOUT_HINT = (
    "No reply received within the timeout period. "
    "You can call slack_read_thread later to check for replies."
)
_CANCELLED_HINT = (
    "The wait was cancelled before a reply arrived. "
    "You can call slack_read_thread later to check for replies."
)
_SEARCH_CHANNEL_REQUIRED = "Channel ID required for search with bot token."


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool call: a payload, or an error text.

    ``negative`` marks a successful call whose payload reports that the
    operation did not get what it waited for (timeout, cancellation).
    """

    payload: BaseModel | None = None
    error: str | None = None
    negative: bool = False

    @classmethod
    def failure(cls, message: str) -> ToolResult:
        return cls(error=f"Error: {message}")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def outcome(self) -> str:
        if not self.ok:
            return "error"
        return "negative" if self.negative else "ok"

    def render(self) -> str:
        """Return the text payload sent back over MCP."""
        if self.error is not None:
            return self.error
        if self.payload is None:
            return "{}"
        return self.payload.model_dump_json(indent=2, exclude_none=True)


def _validation_message(exc: ValidationError) -> str:
    err = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(part) for part in err.get("loc", ()))
    msg = str(err.get("msg", "Invalid input"))
    return f"{loc}: {msg}" if loc else msg


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


Handler = Callable[[Any], Awaitable[ToolResult]]


class ToolDispatcher:
    """Routes tool calls to their handlers and shapes the results."""

    def __init__(
        self,
        client: SlackClient,
        identity: IdentityResolver,
        engine: ReplyWaitEngine,
        config: BridgeConfig,
        *,
        history_config: HistoryConfig | None = None,
        wait_config: WaitConfig | None = None,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._identity = identity
        self._engine = engine
        self._config = config
        self._history = history_config or HistoryConfig()
        self._wait = wait_config or WaitConfig()
        self._now = now
        self._active_waits: set[CancelToken] = set()
        self._routes: dict[str, tuple[type[BaseModel], Handler]] = {
            "slack_read_messages": (ReadMessagesArgs, self._read_messages),
            "slack_post_message": (PostMessageArgs, self._post_message),
            "slack_post_to_thread": (PostToThreadArgs, self._post_to_thread),
            "slack_read_thread": (ReadThreadArgs, self._read_thread),
            "slack_wait_for_reply": (WaitForReplyArgs, self._wait_for_reply),
            "slack_get_file": (GetFileArgs, self._get_file),
            "slack_download_file": (DownloadFileArgs, self._download_file),
            "slack_list_channels": (ListChannelsArgs, self._list_channels),
            "slack_search_messages": (SearchMessagesArgs, self._search_messages),
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._routes)

    @property
    def active_wait_count(self) -> int:
        return len(self._active_waits)

    def cancel_active_waits(self) -> int:
        """Fire the cancel token of every in-flight reply-wait."""
        tokens = list(self._active_waits)
        for token in tokens:
            token.cancel()
        return len(tokens)

    async def dispatch(self, name: str, arguments: dict | None = None) -> ToolResult:
        route = self._routes.get(name)
        if route is None:
            return ToolResult(error=f"Unknown tool: {name}")

        model, handler = route
        start = perf_counter()
        result = await self._invoke(name, model, handler, arguments or {})
        record_latency(
            operation=f"tool.{name}",
            duration_ms=(perf_counter() - start) * 1000,
            outcome=result.outcome,
        )
        return result

    async def _invoke(
        self,
        name: str,
        model: type[BaseModel],
        handler: Handler,
        arguments: dict,
    ) -> ToolResult:
        try:
            args = model.model_validate(arguments)
        except ValidationError as exc:
            return ToolResult.failure(_validation_message(exc))

        try:
            return await handler(args)
        except DownloadError as exc:
            # already carries its own "Error downloading file:" prefix
            logger.info("Tool %s failed: %s", name, exc)
            return ToolResult(error=str(exc))
        except BridgeError as exc:
            logger.info("Tool %s failed: %s", name, exc)
            return ToolResult.failure(str(exc))
        except Exception as exc:
            logger.exception("Unexpected fault in tool %s", name)
            return ToolResult.failure(str(exc) or type(exc).__name__)

    def _channel(self, channel_id: str | None) -> str:
        channel = self._config.resolve_channel(channel_id)
        if channel is None:
            raise MissingChannelError()
        return channel

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def _read_messages(self, args: ReadMessagesArgs) -> ToolResult:
        channel = self._channel(args.channel_id)
        days_back = args.days_back or self._history.days_back
        limit = args.limit or self._history.limit
        oldest = args.oldest or str(int(self._now() - days_back * _SECONDS_PER_DAY))

        raw = await self._client.history(
            channel, oldest=oldest, limit=limit, inclusive=True
        )
        messages = chronological([normalize_history_message(msg) for msg in raw])
        return ToolResult(
            ReadMessagesResult(
                channel=channel,
                message_count=len(messages),
                messages=messages,
            )
        )

    async def _post_message(self, args: PostMessageArgs) -> ToolResult:
        channel = self._channel(args.channel_id)
        posted = await self._client.post_message(channel, args.text)
        return ToolResult(
            PostMessageResult(
                channel=posted["channel"],
                ts=posted["ts"],
                message=posted["message"].get("text"),
            )
        )

    async def _post_to_thread(self, args: PostToThreadArgs) -> ToolResult:
        channel = self._channel(args.channel_id)
        posted = await self._client.post_message(
            channel, args.text, thread_ts=args.thread_ts
        )
        return ToolResult(
            PostToThreadResult(
                channel=posted["channel"],
                ts=posted["ts"],
                thread_ts=args.thread_ts,
                message=posted["message"].get("text"),
            )
        )

    async def _read_thread(self, args: ReadThreadArgs) -> ToolResult:
        channel = self._channel(args.channel_id)
        raw = await self._client.replies(channel, args.thread_ts)
        self_id = await self._identity.resolve()
        messages = [normalize_thread_message(msg, self_id) for msg in raw]
        return ToolResult(
            ReadThreadResult(
                channel=channel,
                thread_ts=args.thread_ts,
                reply_count=max(len(messages) - 1, 0),
                messages=messages,
            )
        )

    async def _wait_for_reply(self, args: WaitForReplyArgs) -> ToolResult:
        timeout_minutes = args.timeout_minutes or self._wait.timeout_minutes
        request = WaitRequest(
            channel=self._config.resolve_channel(args.channel_id),
            thread_ts=args.thread_ts,
            message=args.message,
            poll_interval_seconds=(
                args.poll_interval_seconds or self._wait.poll_interval_seconds
            ),
            timeout_minutes=timeout_minutes,
        )
        token = CancelToken()
        self._active_waits.add(token)
        try:
            outcome = await self._engine.wait(request, cancel=token)
        finally:
            self._active_waits.discard(token)

        session = outcome.session
        if outcome.state is WaitState.found and outcome.reply is not None:
            return ToolResult(
                ReplyReceivedResult(
                    channel=session.channel,
                    thread_ts=session.thread_ts,
                    reply=normalize_reply(outcome.reply),
                    wait_duration_seconds=round(outcome.elapsed_seconds),
                )
            )

        cancelled = outcome.state is WaitState.cancelled
        return ToolResult(
            ReplyNotReceivedResult(
                reason="cancelled" if cancelled else "timeout",
                channel=session.channel,
                thread_ts=session.thread_ts,
                timeout_minutes=outcome.timeout_minutes,
                hint=_CANCELLED_HINT if cancelled else _TIMEOUT_HINT,
            ),
            negative=True,
        )

    async def _search_messages(self, args: SearchMessagesArgs) -> ToolResult:
        # search.messages needs a user token; scan recent history instead.
        channel = self._config.resolve_channel(args.channel_id)
        if channel is None:
            raise MissingChannelError(_SEARCH_CHANNEL_REQUIRED)

        raw = await self._client.history(
            channel, limit=self._history.search_scan_limit
        )
        needle = args.query.lower()
        matches = [
            normalize_search_match(msg)
            for msg in raw
            if needle in (msg.get("text") or "").lower()
        ]
        return ToolResult(
            SearchMessagesResult(
                query=args.query,
                channel=channel,
                match_count=len(matches),
                matches=matches,
            )
        )

    # ------------------------------------------------------------------
    # Files and channels
    # ------------------------------------------------------------------

    async def _get_file(self, args: GetFileArgs) -> ToolResult:
        info = await self._client.file_info(args.file_id)
        created = info.get("created")
        return ToolResult(
            FileInfoResult(
                id=info.get("id"),
                name=info.get("name"),
                title=info.get("title"),
                mimetype=info.get("mimetype"),
                size=info.get("size"),
                url_private=info.get("url_private"),
                url_private_download=info.get("url_private_download"),
                created=iso_date(created) if created is not None else None,
                user=info.get("user"),
            )
        )

    async def _download_file(self, args: DownloadFileArgs) -> ToolResult:
        info = await self._client.file_info(args.file_id)
        url = info.get("url_private_download") or info.get("url_private")
        if not url:
            raise DownloadUnavailableError()

        data = await self._client.download(url)
        await asyncio.to_thread(_write_bytes, Path(args.save_path), data)
        logger.info("Downloaded %s (%d bytes) -> %s", info.get("name"), len(data), args.save_path)
        return ToolResult(
            DownloadFileResult(
                file_name=info.get("name"),
                saved_to=args.save_path,
                size=len(data),
            )
        )

    async def _list_channels(self, args: ListChannelsArgs) -> ToolResult:
        raw = await self._client.list_channels(args.types or self._history.channel_types)
        channels = [
            ChannelSummary(
                id=ch.get("id"),
                name=ch.get("name"),
                is_private=ch.get("is_private"),
                num_members=ch.get("num_members"),
            )
            for ch in raw
        ]
        return ToolResult(
            ListChannelsResult(channel_count=len(channels), channels=channels)
        )
