"""Session and project metadata types."""

from dataclasses import dataclass, field
from datetime import datetime

from claude_chat_sessions.errors import ParseFailure
from claude_chat_sessions.types.events import Event


@dataclass
class SessionMetrics:
    first_message_time: datetime | None = None
    prompts_sent: int = 0
    tools_executed: int = 0
    tools_failed: int = 0
    files_created: int = 0
    files_modified: int = 0
    files_deleted: int = 0
    mcp_calls: int = 0
    code_blocks_generated: int = 0
    errors_encountered: int = 0
    checkpoint_count: int = 0
    was_resumed: bool = False
    model_changes: list[str] = field(default_factory=list)
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return (self.total_input_tokens + self.total_output_tokens +
                self.cache_read_input_tokens + self.cache_creation_input_tokens)

    @property
    def file_operations(self) -> int:
        return self.files_created + self.files_modified + self.files_deleted

    @property
    def tool_success_rate(self) -> float:
        """Percentage of executed tools that did not report an error."""
        if self.tools_executed == 0:
            return 0.0
        succeeded = max(0, self.tools_executed - self.tools_failed)
        return succeeded / self.tools_executed * 100


@dataclass
class SessionSummary:
    id: str
    file_path: str
    file_size: int = 0
    modified_at: float = 0.0
    # Only filled by SessionLoader.recent_sessions
    preview: str = ""
    message_count: int = 0


@dataclass
class Project:
    id: str          # Encoded directory name
    path: str        # Decoded filesystem path
    name: str        # Last path segment
    sessions: list[SessionSummary] = field(default_factory=list)

    @property
    def session_ids(self) -> list[str]:
        return [s.id for s in self.sessions]


@dataclass
class Session:
    id: str
    project_path: str = ""
    events: list[Event] = field(default_factory=list)
    metrics: SessionMetrics = field(default_factory=SessionMetrics)
    parse_failures: list[ParseFailure] = field(default_factory=list)

    @property
    def parse_error_count(self) -> int:
        return len(self.parse_failures)

    @property
    def is_empty(self) -> bool:
        return not self.events and not self.parse_failures
