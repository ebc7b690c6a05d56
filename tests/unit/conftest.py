"""Unit test fixtures — FastMCP client wired to the fake Slack."""

from __future__ import annotations

import pytest
from fastmcp import Client


@pytest.fixture()
async def mcp_client(dispatcher):
    """Yield a FastMCP Client wired to the Slack bridge server."""
    from slackbridge.server import mcp

    async with Client(mcp) as client:
        yield client
