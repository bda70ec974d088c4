"""Event-level types for parsed transcript lines."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    SYSTEM = "system"
    ASSISTANT = "assistant"
    USER = "user"
    RESULT = "result"
    ERROR = "error"
    META = "meta"


class ContentType(str, Enum):
    TEXT = "text"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"


@dataclass
class TextContent:
    text: str = ""

    @property
    def type(self) -> ContentType:
        return ContentType.TEXT


@dataclass
class ToolUseContent:
    id: str = ""
    name: str = ""
    input: Any = None  # tool-specific, never validated

    @property
    def type(self) -> ContentType:
        return ContentType.TOOL_USE


@dataclass
class ToolResultContent:
    tool_use_id: str = ""
    content: Any = ""  # str or list of blocks
    is_error: bool = False

    @property
    def type(self) -> ContentType:
        return ContentType.TOOL_RESULT


Content = TextContent | ToolUseContent | ToolResultContent


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None

    @property
    def total(self) -> int:
        return (self.input_tokens + self.output_tokens +
                (self.cache_read_input_tokens or 0) +
                (self.cache_creation_input_tokens or 0))


@dataclass
class ErrorInfo:
    type: str = ""
    message: str = ""
    code: str | None = None


@dataclass
class Message:
    role: str | None = None
    content: list[Content] = field(default_factory=list)
    usage: Usage | None = None
    id: str | None = None
    model: str | None = None
    stop_reason: str | None = None
    stop_sequence: str | None = None

    def blocks(self, content_type: ContentType) -> list[Content]:
        return [block for block in self.content if block.type == content_type]


@dataclass
class Event:
    """One transcript line.

    Only ``type`` is guaranteed; everything else is whatever the writer put
    on the line. ``checkpoint_data`` is kept exactly as decoded.
    """
    type: EventType
    subtype: str | None = None
    message: Message | None = None
    session_id: str | None = None
    project_id: str | None = None
    timestamp: str | None = None
    error: ErrorInfo | None = None
    checkpoint_data: Any = None
    is_meta: bool = False
    leaf_uuid: str | None = None
    summary: str | None = None
    line_number: int = 0
