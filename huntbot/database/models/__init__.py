from .user import User, format_display_name
from .post import Post
from .inbox import CONTEST_MESSAGE_TYPES, InboxMessage, InboxMessageType
from .contest import ContestAssignment, ContestCapture, ContestRole, ContestWeek

__all__ = [
    "User",
    "format_display_name",
    "Post",
    "InboxMessage",
    "InboxMessageType",
    "CONTEST_MESSAGE_TYPES",
    "ContestWeek",
    "ContestAssignment",
    "ContestCapture",
    "ContestRole",
]
