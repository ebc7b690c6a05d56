"""Exception taxonomy for the Slack bridge.

Components raise these and let them propagate; only the tool dispatcher
turns them into ``Error: <message>`` text payloads.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for every error raised by the bridge."""


class MissingChannelError(BridgeError):
    """No channel ID from the arguments and no configured default."""

    def __init__(
        self,
        message: str = "No channel ID provided and no default channel configured.",
    ) -> None:
        super().__init__(message)


class MissingTargetError(BridgeError):
    """A reply-wait was requested with neither a thread nor a message."""

    def __init__(
        self, message: str = "Either thread_ts or message must be provided."
    ) -> None:
        super().__init__(message)


class MissingCredentialError(BridgeError):
    """``SLACK_BOT_TOKEN`` is not set; the server must not start."""

    def __init__(
        self,
        message: str = "SLACK_BOT_TOKEN environment variable is required",
    ) -> None:
        super().__init__(message)


class UpstreamError(BridgeError):
    """A Slack Web API call or network request failed."""


class DownloadError(UpstreamError):
    """A file download returned a non-success HTTP status."""


class DownloadUnavailableError(BridgeError):
    """The file has neither ``url_private_download`` nor ``url_private``."""

    def __init__(
        self, message: str = "No download URL available for this file."
    ) -> None:
        super().__init__(message)
