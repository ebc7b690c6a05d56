"""Slack bridge MCP server: Slack tools and a blocking reply-wait for agents."""

__version__ = "2.0.0"
