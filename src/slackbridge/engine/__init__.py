"""Engine domain — the reply-wait polling state machine."""

from slackbridge.engine.reply_wait import CancelToken
from slackbridge.engine.reply_wait import ReplyWaitEngine
from slackbridge.engine.reply_wait import select_reply
from slackbridge.engine.reply_wait import WaitOutcome
from slackbridge.engine.reply_wait import WaitRequest
from slackbridge.engine.reply_wait import WaitSession
from slackbridge.engine.reply_wait import WaitState

__all__ = [
    "CancelToken",
    "ReplyWaitEngine",
    "WaitOutcome",
    "WaitRequest",
    "WaitSession",
    "WaitState",
    "select_reply",
]
