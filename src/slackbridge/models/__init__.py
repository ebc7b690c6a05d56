"""Models domain — tool argument and result schemas."""

from __future__ import annotations

from slackbridge.models.schemas import ChannelSummary
from slackbridge.models.schemas import DownloadFileArgs
from slackbridge.models.schemas import DownloadFileResult
from slackbridge.models.schemas import FileInfoResult
from slackbridge.models.schemas import FileSummary
from slackbridge.models.schemas import GetFileArgs
from slackbridge.models.schemas import HistoryMessage
from slackbridge.models.schemas import ListChannelsArgs
from slackbridge.models.schemas import ListChannelsResult
from slackbridge.models.schemas import PostMessageArgs
from slackbridge.models.schemas import PostMessageResult
from slackbridge.models.schemas import PostToThreadArgs
from slackbridge.models.schemas import PostToThreadResult
from slackbridge.models.schemas import ReadMessagesArgs
from slackbridge.models.schemas import ReadMessagesResult
from slackbridge.models.schemas import ReadThreadArgs
from slackbridge.models.schemas import ReadThreadResult
from slackbridge.models.schemas import ReplyMessage
from slackbridge.models.schemas import ReplyNotReceivedResult
from slackbridge.models.schemas import ReplyReceivedResult
from slackbridge.models.schemas import SearchMatch
from slackbridge.models.schemas import SearchMessagesArgs
from slackbridge.models.schemas import SearchMessagesResult
from slackbridge.models.schemas import ThreadMessage
from slackbridge.models.schemas import WaitForReplyArgs

__all__ = [
    "ChannelSummary",
    "DownloadFileArgs",
    "DownloadFileResult",
    "FileInfoResult",
    "FileSummary",
    "GetFileArgs",
    "HistoryMessage",
    "ListChannelsArgs",
    "ListChannelsResult",
    "PostMessageArgs",
    "PostMessageResult",
    "PostToThreadArgs",
    "PostToThreadResult",
    "ReadMessagesArgs",
    "ReadMessagesResult",
    "ReadThreadArgs",
    "ReadThreadResult",
    "ReplyMessage",
    "ReplyNotReceivedResult",
    "ReplyReceivedResult",
    "SearchMatch",
    "SearchMessagesArgs",
    "SearchMessagesResult",
    "ThreadMessage",
    "WaitForReplyArgs",
]
