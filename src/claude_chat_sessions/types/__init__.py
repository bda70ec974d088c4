"""Type definitions for the session engine."""

from claude_chat_sessions.types.events import (
    Content,
    ContentType,
    ErrorInfo,
    Event,
    EventType,
    Message,
    TextContent,
    ToolResultContent,
    ToolUseContent,
    Usage,
)
from claude_chat_sessions.types.sessions import (
    Project,
    Session,
    SessionMetrics,
    SessionSummary,
)

__all__ = [
    "Content",
    "ContentType",
    "ErrorInfo",
    "Event",
    "EventType",
    "Message",
    "TextContent",
    "ToolResultContent",
    "ToolUseContent",
    "Usage",
    "Project",
    "Session",
    "SessionMetrics",
    "SessionSummary",
]
