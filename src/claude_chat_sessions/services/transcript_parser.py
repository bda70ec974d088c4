"""Line-level parser for transcript JSONL files.

Parsing is forgiving about shape: unknown fields are ignored,
absent fields fall back to defaults, and payloads of the wrong JSON type are
treated as absent. Only two things make a line unusable: it is not a JSON
object, or its ``type`` is not one we know.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

import orjson

from claude_chat_sessions.errors import ParseFailure, ParseFailureKind
from claude_chat_sessions.types.events import (
    Content,
    ErrorInfo,
    Event,
    EventType,
    Message,
    TextContent,
    ToolResultContent,
    ToolUseContent,
    Usage,
)

logger = logging.getLogger(__name__)

# Max size for a single JSONL line (10MB)
MAX_LINE_SIZE = 10 * 1024 * 1024

# Writer vocabulary that maps onto one of the six event kinds
TYPE_ALIASES: dict[str, EventType] = {
    "init": EventType.SYSTEM,
    "tool_use": EventType.ASSISTANT,
    # Bare tool_result lines carry no conversation turn
    "tool_result": EventType.META,
    "summary": EventType.META,
    "file-history-snapshot": EventType.META,
    "queue-operation": EventType.META,
}

ParseOutcome = Event | ParseFailure


def parse_line(line: str | bytes, line_number: int = 0) -> ParseOutcome | None:
    """Parse one transcript line.

    Returns an Event, a ParseFailure, or None for a blank line. Never raises.
    """
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    line = line.strip()
    if not line:
        return None

    if len(line) > MAX_LINE_SIZE:
        return ParseFailure(
            ParseFailureKind.SYNTAX,
            f"line exceeds {MAX_LINE_SIZE // (1024 * 1024)}MB",
            line_number,
        )

    try:
        raw = orjson.loads(line)
    except orjson.JSONDecodeError as e:
        return ParseFailure(ParseFailureKind.SYNTAX, str(e), line_number)

    if not isinstance(raw, dict):
        return ParseFailure(
            ParseFailureKind.SYNTAX,
            f"expected a JSON object, got {type(raw).__name__}",
            line_number,
        )

    type_str = raw.get("type")
    if not isinstance(type_str, str) or not type_str:
        return ParseFailure(ParseFailureKind.UNKNOWN_EVENT_KIND, "missing type", line_number)

    event_type = resolve_event_type(type_str)
    if event_type is None:
        return ParseFailure(
            ParseFailureKind.UNKNOWN_EVENT_KIND,
            f"unrecognized type {type_str!r}",
            line_number,
        )

    return _parse_raw_event(raw, event_type, line_number)


def resolve_event_type(type_str: str) -> EventType | None:
    try:
        return EventType(type_str)
    except ValueError:
        return TYPE_ALIASES.get(type_str)


def stream_transcript(file_path: str | Path) -> Iterator[tuple[int, ParseOutcome]]:
    """Stream-parse a transcript file, yielding (line_number, outcome) pairs.

    Blank lines are skipped. A missing file yields nothing.
    """
    path = Path(file_path)
    if not path.exists():
        logger.debug("Transcript not found: %s", path)
        return

    line_num = 0
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line_num += 1
            outcome = parse_line(line, line_num)
            if outcome is None:
                continue
            if isinstance(outcome, ParseFailure):
                if len(line) > MAX_LINE_SIZE:
                    logger.warning("Skipping oversized line %d in %s", line_num, path.name)
                else:
                    logger.debug("Unparseable line in %s: %s", path.name, outcome)
            yield line_num, outcome


def parse_transcript(file_path: str | Path) -> tuple[list[Event], list[ParseFailure]]:
    """Parse an entire transcript file into events and failures."""
    events: list[Event] = []
    failures: list[ParseFailure] = []
    for _, outcome in stream_transcript(file_path):
        if isinstance(outcome, ParseFailure):
            failures.append(outcome)
        else:
            events.append(outcome)
    return events, failures


def extract_preview(file_path: str | Path, max_chars: int = 100) -> tuple[str, int]:
    """Return the first real user text and the user+assistant event count."""
    preview = ""
    message_count = 0
    for _, outcome in stream_transcript(file_path):
        if not isinstance(outcome, Event):
            continue
        if outcome.type not in (EventType.USER, EventType.ASSISTANT):
            continue
        message_count += 1
        if preview or outcome.type != EventType.USER or outcome.is_meta:
            continue
        if outcome.message is None:
            continue
        for block in outcome.message.content:
            if isinstance(block, TextContent) and block.text.strip():
                preview = block.text.replace("\n", " ").strip()[:max_chars]
                break
    return preview, message_count


# ---------------------------------------------------------------------------
# Serialization back to the wire shape
# ---------------------------------------------------------------------------

def event_to_dict(event: Event) -> dict:
    """Serialize an Event to the transcript wire shape, omitting absent fields."""
    data: dict[str, Any] = {"type": event.type.value}
    if event.subtype is not None:
        data["subtype"] = event.subtype
    if event.message is not None:
        data["message"] = _message_to_dict(event.message)
    if event.session_id is not None:
        data["session_id"] = event.session_id
    if event.project_id is not None:
        data["project_id"] = event.project_id
    if event.timestamp is not None:
        data["timestamp"] = event.timestamp
    if event.error is not None:
        error = {"type": event.error.type, "message": event.error.message}
        if event.error.code is not None:
            error["code"] = event.error.code
        data["error"] = error
    if event.checkpoint_data is not None:
        data["checkpoint_data"] = event.checkpoint_data
    if event.is_meta:
        data["isMeta"] = True
    if event.leaf_uuid is not None:
        data["leaf_uuid"] = event.leaf_uuid
    if event.summary is not None:
        data["summary"] = event.summary
    return data


def encode_event(event: Event) -> str:
    return orjson.dumps(event_to_dict(event)).decode("utf-8")


def _message_to_dict(message: Message) -> dict:
    data: dict[str, Any] = {"content": [_content_to_dict(c) for c in message.content]}
    for key in ("role", "id", "model", "stop_reason", "stop_sequence"):
        value = getattr(message, key)
        if value is not None:
            data[key] = value
    if message.usage is not None:
        usage = {
            "input_tokens": message.usage.input_tokens,
            "output_tokens": message.usage.output_tokens,
        }
        if message.usage.cache_creation_input_tokens is not None:
            usage["cache_creation_input_tokens"] = message.usage.cache_creation_input_tokens
        if message.usage.cache_read_input_tokens is not None:
            usage["cache_read_input_tokens"] = message.usage.cache_read_input_tokens
        data["usage"] = usage
    return data


def _content_to_dict(block: Content) -> dict:
    if isinstance(block, TextContent):
        return {"type": block.type.value, "text": block.text}
    if isinstance(block, ToolUseContent):
        return {"type": block.type.value, "id": block.id, "name": block.name, "input": block.input}
    if isinstance(block, ToolResultContent):
        return {
            "type": block.type.value,
            "tool_use_id": block.tool_use_id,
            "content": block.content,
            "is_error": block.is_error,
        }
    raise AssertionError(f"unhandled content block {block!r}")


# ---------------------------------------------------------------------------
# Raw dict → Event
# ---------------------------------------------------------------------------

def _parse_raw_event(raw: dict, event_type: EventType, line_number: int) -> Event:
    return Event(
        type=event_type,
        subtype=_str(raw.get("subtype")),
        message=_parse_message(raw.get("message")),
        session_id=_str(_first(raw, "session_id", "sessionId")),
        project_id=_str(_first(raw, "project_id", "projectId")),
        timestamp=_parse_timestamp(raw.get("timestamp")),
        error=_parse_error(raw.get("error")),
        checkpoint_data=_first(raw, "checkpoint_data", "checkpointData"),
        is_meta=_bool(raw.get("isMeta", raw.get("is_meta"))),
        leaf_uuid=_str(_first(raw, "leaf_uuid", "leafUuid")),
        summary=_str(raw.get("summary")),
        line_number=line_number,
    )


def _parse_message(value: Any) -> Message | None:
    if not isinstance(value, dict):
        return None

    content = value.get("content")
    blocks: list[Content] = []
    if isinstance(content, str):
        blocks.append(TextContent(text=content))
    elif isinstance(content, list):
        for block in content:
            parsed = _parse_content(block)
            if parsed is not None:
                blocks.append(parsed)

    return Message(
        role=_str(value.get("role")),
        content=blocks,
        usage=_parse_usage(value.get("usage")),
        id=_str(value.get("id")),
        model=_str(value.get("model")) or None,
        stop_reason=_str(value.get("stop_reason")),
        stop_sequence=_str(value.get("stop_sequence")),
    )


def _parse_content(block: Any) -> Content | None:
    if isinstance(block, str):
        return TextContent(text=block)
    if not isinstance(block, dict):
        return None

    block_type = block.get("type")
    if block_type == "text":
        return TextContent(text=_str(block.get("text")) or "")
    if block_type == "tool_use":
        return ToolUseContent(
            id=_str(block.get("id")) or "",
            name=_str(block.get("name")) or "",
            input=block.get("input"),
        )
    if block_type == "tool_result":
        return ToolResultContent(
            tool_use_id=_str(block.get("tool_use_id")) or "",
            content=block.get("content", ""),
            is_error=_bool(block.get("is_error")),
        )
    # thinking, image, and whatever the writer adds next
    return None


def _parse_usage(value: Any) -> Usage | None:
    if not isinstance(value, dict):
        return None
    return Usage(
        input_tokens=_count(value.get("input_tokens")) or 0,
        output_tokens=_count(value.get("output_tokens")) or 0,
        cache_creation_input_tokens=_count(value.get("cache_creation_input_tokens")),
        cache_read_input_tokens=_count(value.get("cache_read_input_tokens")),
    )


def _parse_error(value: Any) -> ErrorInfo | None:
    if isinstance(value, str) and value:
        return ErrorInfo(type="error", message=value)
    if not isinstance(value, dict):
        return None
    code = value.get("code")
    return ErrorInfo(
        type=_str(value.get("type")) or "error",
        message=_str(value.get("message")) or "",
        code=str(code) if code is not None else None,
    )


def _parse_timestamp(ts_value: Any) -> str | None:
    """Keep ISO strings verbatim; convert epoch numbers to ISO-8601."""
    if isinstance(ts_value, str):
        return ts_value or None
    if isinstance(ts_value, (int, float)) and not isinstance(ts_value, bool):
        seconds = ts_value / 1000 if ts_value > 1e12 else ts_value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()
        except (ValueError, OverflowError, OSError):
            return None
    return None


def parse_iso_timestamp(ts_value: str | None) -> datetime | None:
    """Parse an Event timestamp into a datetime, or None if unparseable."""
    if not ts_value:
        return None
    try:
        # ISO 8601 format: "2026-02-13T12:00:00.000Z"
        return datetime.fromisoformat(ts_value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _first(raw: dict, *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() == "true"
    return False


def _count(value: Any) -> int | None:
    """Non-negative token count, or None when absent or unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None
