"""Reply-wait engine: block until a human answers in a Slack thread.

A session starts (or resumes) a thread, then polls it at a fixed
interval.  Each poll looks for messages that are not the parent, not
authored by the bridge, and newer than the session watermark.  The
newest such message ends the session; otherwise the watermark moves to
the last message seen and the loop continues until the deadline.

States::

    STARTING -> POLLING -> FOUND
                        -> TIMED_OUT
                        -> CANCELLED
    (any)    -> FAILED    (fault re-raised to the caller)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from slackbridge.errors import MissingChannelError
from slackbridge.errors import MissingTargetError
from slackbridge.slack.normalize import ts_value

logger = logging.getLogger(__name__)


class _ThreadClient(Protocol):
    async def post_message(
        self, channel: str, text: str, *, thread_ts: str | None = None
    ) -> dict: ...

    async def replies(self, channel: str, thread_ts: str) -> list[dict]: ...


class _SelfIdentity(Protocol):
    async def resolve(self) -> str | None: ...


class WaitState(str, Enum):
    """Lifecycle of one reply-wait session."""

    starting = "starting"
    polling = "polling"
    found = "found"
    timed_out = "timed_out"
    cancelled = "cancelled"
    failed = "failed"


class CancelToken:
    """Lets a supervisor end a wait at its next suspension point."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


@dataclass(frozen=True)
class WaitRequest:
    channel: str | None
    thread_ts: str | None = None
    message: str | None = None
    poll_interval_seconds: float = 30.0
    timeout_minutes: float = 15.0


@dataclass
class WaitSession:
    """In-memory state of one wait; discarded when the wait returns."""

    channel: str
    thread_ts: str
    watermark: str
    started_at: float
    deadline: float
    poll_interval: float
    state: WaitState = WaitState.polling
    polls: int = 0

    def advance(self, ts: str) -> None:
        """Move the watermark forward to *ts*; older values are ignored."""
        if ts_value(ts) > ts_value(self.watermark):
            self.watermark = ts


@dataclass(frozen=True)
class WaitOutcome:
    state: WaitState
    session: WaitSession
    elapsed_seconds: float
    timeout_minutes: float
    reply: dict | None = None


def select_reply(
    messages: Sequence[dict],
    *,
    thread_ts: str,
    watermark: str,
    self_id: str | None,
) -> dict | None:
    """Return the newest qualifying reply in *messages*, if any."""
    floor = ts_value(watermark)
    candidates = [
        msg
        for msg in messages
        if (self_id is None or msg.get("user") != self_id)
        and msg.get("ts") != thread_ts
        and ts_value(msg["ts"]) > floor
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda msg: ts_value(msg["ts"]))


class ReplyWaitEngine:
    """Runs reply-wait sessions against a Slack client."""

    def __init__(
        self,
        client: _ThreadClient,
        identity: _SelfIdentity,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._identity = identity
        self._clock = clock
        self._sleep = sleep

    async def wait(
        self, request: WaitRequest, *, cancel: CancelToken | None = None
    ) -> WaitOutcome:
        if not request.channel:
            raise MissingChannelError()
        if not request.thread_ts and not request.message:
            raise MissingTargetError()

        channel = request.channel
        self_id = await self._identity.resolve()
        thread_ts = await self._start(channel, request)

        started = self._clock()
        session = WaitSession(
            channel=channel,
            thread_ts=thread_ts,
            watermark=thread_ts,
            started_at=started,
            deadline=started + request.timeout_minutes * 60,
            poll_interval=request.poll_interval_seconds,
        )
        logger.info(
            "Waiting for reply channel=%s thread_ts=%s interval=%ss timeout=%smin",
            channel,
            thread_ts,
            request.poll_interval_seconds,
            request.timeout_minutes,
        )

        try:
            while self._clock() < session.deadline:
                if await self._suspend(session.poll_interval, cancel):
                    return self._finish(session, request, WaitState.cancelled)

                messages = await self._client.replies(channel, thread_ts)
                session.polls += 1
                reply = select_reply(
                    messages,
                    thread_ts=thread_ts,
                    watermark=session.watermark,
                    self_id=self_id,
                )
                if reply is not None:
                    return self._finish(session, request, WaitState.found, reply)
                if messages:
                    session.advance(messages[-1]["ts"])
        except Exception:
            session.state = WaitState.failed
            logger.warning(
                "Reply wait failed channel=%s thread_ts=%s after %d polls",
                channel,
                thread_ts,
                session.polls,
            )
            raise

        return self._finish(session, request, WaitState.timed_out)

    async def _start(self, channel: str, request: WaitRequest) -> str:
        """Post the opening message if any and return the thread key."""
        if not request.message:
            return request.thread_ts or ""
        posted = await self._client.post_message(
            channel, request.message, thread_ts=request.thread_ts
        )
        if request.thread_ts:
            return request.thread_ts
        return posted["ts"]

    async def _suspend(self, seconds: float, cancel: CancelToken | None) -> bool:
        """Sleep for *seconds*; return ``True`` if *cancel* fired first."""
        if cancel is None:
            await self._sleep(seconds)
            return False
        if cancel.cancelled:
            return True
        sleeper = asyncio.ensure_future(self._sleep(seconds))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()
        return cancel.cancelled

    def _finish(
        self,
        session: WaitSession,
        request: WaitRequest,
        state: WaitState,
        reply: dict | None = None,
    ) -> WaitOutcome:
        session.state = state
        elapsed = self._clock() - session.started_at
        logger.info(
            "Reply wait %s channel=%s thread_ts=%s polls=%d elapsed=%.1fs",
            state.value,
            session.channel,
            session.thread_ts,
            session.polls,
            elapsed,
        )
        return WaitOutcome(
            state=state,
            session=session,
            elapsed_seconds=elapsed,
            timeout_minutes=request.timeout_minutes,
            reply=reply,
        )
