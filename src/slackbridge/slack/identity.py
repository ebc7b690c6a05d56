"""Lazy resolution of the bridge's own Slack user ID."""

from __future__ import annotations

import logging
from typing import Protocol

from slackbridge.errors import UpstreamError

logger = logging.getLogger(__name__)


class _AuthTester(Protocol):
    async def auth_test(self) -> str | None: ...


class IdentityResolver:
    """Resolve the token's user ID once and reuse it.

    The first successful ``auth.test`` is cached for the resolver's
    lifetime.  A failed lookup is logged and yields ``None`` without being
    cached; callers then treat every message as a candidate reply.
    """

    def __init__(self, client: _AuthTester) -> None:
        self._client = client
        self._user_id: str | None = None

    @property
    def cached(self) -> str | None:
        return self._user_id

    async def resolve(self) -> str | None:
        if self._user_id is not None:
            return self._user_id
        try:
            user_id = await self._client.auth_test()
        except UpstreamError as exc:
            logger.warning("Failed to get bot user ID: %s", exc)
            return None
        if user_id:
            self._user_id = user_id
        return self._user_id
