"""Thin adapter over the Slack Web API.

Every method is a single request/response round trip.  There are no
retries; library faults are re-raised as ``UpstreamError`` with the
original exception chained.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from slackbridge.errors import DownloadError
from slackbridge.errors import UpstreamError

logger = logging.getLogger(__name__)


def _upstream_error(method: str, exc: Exception) -> UpstreamError:
    if isinstance(exc, SlackApiError):
        code = exc.response.get("error") if exc.response is not None else None
        return UpstreamError(f"An API error occurred: {code or 'unknown_error'}")
    if isinstance(exc, aiohttp.ClientError):
        return UpstreamError(f"{method} network error: {exc}")
    return UpstreamError(f"{method} failed: {exc}")


class SlackClient:
    """Slack Web API calls used by the bridge tools."""

    def __init__(
        self,
        token: str,
        *,
        web_client: AsyncWebClient | None = None,
        download_timeout_seconds: float = 60.0,
    ) -> None:
        self._token = token
        self._web = web_client or AsyncWebClient(token=token)
        self._download_timeout = aiohttp.ClientTimeout(total=download_timeout_seconds)

    async def _call(self, method: str, request: Awaitable[Any]) -> Any:
        try:
            return await request
        except (SlackClientError, aiohttp.ClientError) as exc:
            raise _upstream_error(method, exc) from exc

    # -- reads --

    async def auth_test(self) -> str | None:
        """Return the user ID bound to the token."""
        response = await self._call("auth.test", self._web.auth_test())
        return response.get("user_id")

    async def list_channels(self, types: str) -> list[dict]:
        response = await self._call(
            "conversations.list",
            self._web.conversations_list(types=types, exclude_archived=True),
        )
        return list(response.get("channels") or [])

    async def history(
        self,
        channel: str,
        *,
        limit: int,
        oldest: str | None = None,
        inclusive: bool = True,
    ) -> list[dict]:
        """Fetch channel history.  Slack returns newest first."""
        params: dict[str, Any] = {"channel": channel, "limit": limit}
        if oldest is not None:
            params["oldest"] = oldest
            params["inclusive"] = inclusive
        response = await self._call(
            "conversations.history", self._web.conversations_history(**params)
        )
        return list(response.get("messages") or [])

    async def replies(self, channel: str, thread_ts: str) -> list[dict]:
        """Fetch every message in a thread, parent first."""
        response = await self._call(
            "conversations.replies",
            self._web.conversations_replies(channel=channel, ts=thread_ts),
        )
        return list(response.get("messages") or [])

    async def file_info(self, file_id: str) -> dict:
        response = await self._call("files.info", self._web.files_info(file=file_id))
        return dict(response.get("file") or {})

    # -- writes --

    async def post_message(
        self,
        channel: str,
        text: str,
        *,
        thread_ts: str | None = None,
    ) -> dict:
        """Post a message, as a thread reply when ``thread_ts`` is given."""
        params: dict[str, Any] = {"channel": channel, "text": text}
        if thread_ts is not None:
            params["thread_ts"] = thread_ts
        response = await self._call(
            "chat.postMessage", self._web.chat_postMessage(**params)
        )
        logger.debug(
            "Posted message channel=%s ts=%s thread_ts=%s",
            response.get("channel"),
            response.get("ts"),
            thread_ts,
        )
        return {
            "channel": response.get("channel"),
            "ts": response.get("ts"),
            "message": response.get("message") or {},
        }

    async def download(self, url: str) -> bytes:
        """Fetch file bytes using the bot token as bearer authorization."""
        try:
            async with aiohttp.ClientSession(timeout=self._download_timeout) as http:
                async with http.get(
                    url, headers={"Authorization": f"Bearer {self._token}"}
                ) as resp:
                    if resp.status != 200:
                        reason = f" {resp.reason}" if resp.reason else ""
                        raise DownloadError(
                            f"Error downloading file: {resp.status}{reason}"
                        )
                    return await resp.read()
        except aiohttp.ClientError as exc:
            raise _upstream_error("files.download", exc) from exc
