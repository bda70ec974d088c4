"""Fold an ordered event stream into a Session and its metrics."""

import re
from typing import Iterable

from claude_chat_sessions.errors import ParseFailure
from claude_chat_sessions.services.transcript_parser import parse_iso_timestamp
from claude_chat_sessions.types.events import (
    Event,
    EventType,
    Message,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)
from claude_chat_sessions.types.sessions import Session, SessionMetrics
from claude_chat_sessions.utils.tool_classifier import ToolCategory, ToolClassifier

DEFAULT_RESUME_SUBTYPES = frozenset({"resume", "resumed", "session_resumed"})

# Opening or closing fence of a Markdown code block
_FENCE_PATTERN = re.compile(r"^[ \t]*(?:```|~~~)", re.MULTILINE)


def count_code_blocks(text: str) -> int:
    """Number of complete fenced code blocks in a Markdown text."""
    if not text:
        return 0
    return len(_FENCE_PATTERN.findall(text)) // 2


class SessionReconstructor:
    """Accumulates one session's events and metrics, one event at a time.

    Each instance owns a fresh Session; nothing is shared between instances,
    so independent loads can run concurrently.
    """

    def __init__(
        self,
        session_id: str,
        project_path: str = "",
        classifier: ToolClassifier | None = None,
        resume_subtypes: Iterable[str] | None = None,
    ):
        self._session = Session(id=session_id, project_path=project_path)
        self._classifier = classifier or ToolClassifier()
        subtypes = DEFAULT_RESUME_SUBTYPES if resume_subtypes is None else resume_subtypes
        self._resume_subtypes = frozenset(s.lower() for s in subtypes)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def metrics(self) -> SessionMetrics:
        return self._session.metrics

    def record_failure(self, failure: ParseFailure):
        self._session.parse_failures.append(failure)

    def feed_outcome(self, outcome: Event | ParseFailure):
        if isinstance(outcome, ParseFailure):
            self.record_failure(outcome)
        else:
            self.feed(outcome)

    def feed(self, event: Event):
        """Append an event and fold it into the metrics."""
        self._session.events.append(event)
        metrics = self._session.metrics

        if metrics.first_message_time is None:
            metrics.first_message_time = parse_iso_timestamp(event.timestamp)

        if event.type == EventType.META:
            return

        if event.type == EventType.SYSTEM:
            if event.subtype and event.subtype.lower() in self._resume_subtypes:
                metrics.was_resumed = True
        elif event.type == EventType.ASSISTANT:
            metrics.prompts_sent += 1
            if event.message is not None:
                self._fold_assistant_message(event.message)
        elif event.type == EventType.USER:
            if event.message is not None:
                self._fold_user_message(event.message)
        elif event.type == EventType.ERROR:
            metrics.errors_encountered += 1
        elif event.type == EventType.RESULT:
            if event.checkpoint_data is not None:
                metrics.checkpoint_count += 1
        else:
            raise AssertionError(f"unhandled event type {event.type!r}")

        # Error payloads on non-error events still count once
        if event.error is not None and event.type != EventType.ERROR:
            metrics.errors_encountered += 1

        if event.message is not None and event.message.usage is not None:
            usage = event.message.usage
            metrics.total_input_tokens += usage.input_tokens
            metrics.total_output_tokens += usage.output_tokens
            metrics.cache_read_input_tokens += usage.cache_read_input_tokens or 0
            metrics.cache_creation_input_tokens += usage.cache_creation_input_tokens or 0

    def _fold_assistant_message(self, message: Message):
        metrics = self._session.metrics
        for block in message.content:
            if isinstance(block, ToolUseContent):
                metrics.tools_executed += 1
                self._count_tool_category(self._classifier.classify(block.name))
            elif isinstance(block, TextContent):
                metrics.code_blocks_generated += count_code_blocks(block.text)

        if message.model and message.model not in metrics.model_changes:
            metrics.model_changes.append(message.model)

    def _fold_user_message(self, message: Message):
        metrics = self._session.metrics
        for block in message.content:
            if isinstance(block, ToolResultContent) and block.is_error:
                metrics.tools_failed += 1
                metrics.errors_encountered += 1

    def _count_tool_category(self, category: ToolCategory):
        metrics = self._session.metrics
        if category == ToolCategory.CREATED:
            metrics.files_created += 1
        elif category == ToolCategory.MODIFIED:
            metrics.files_modified += 1
        elif category == ToolCategory.DELETED:
            metrics.files_deleted += 1
        elif category == ToolCategory.MCP:
            metrics.mcp_calls += 1
        elif category == ToolCategory.OTHER:
            pass
        else:
            raise AssertionError(f"unhandled tool category {category!r}")


def reconstruct(
    events: Iterable[Event | ParseFailure],
    session_id: str = "",
    project_path: str = "",
    classifier: ToolClassifier | None = None,
    resume_subtypes: Iterable[str] | None = None,
) -> Session:
    """Fold a whole sequence of parser outcomes into a new Session."""
    reconstructor = SessionReconstructor(
        session_id,
        project_path=project_path,
        classifier=classifier,
        resume_subtypes=resume_subtypes,
    )
    for outcome in events:
        reconstructor.feed_outcome(outcome)
    return reconstructor.session
