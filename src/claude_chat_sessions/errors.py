"""Error types for transcript discovery and parsing."""

from dataclasses import dataclass
from enum import Enum


class SessionsError(Exception):
    """Base class for errors raised by the session engine."""


class StorageUnavailableError(SessionsError):
    """The projects root or a project directory cannot be read."""

    def __init__(self, path, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        message = f"Storage unavailable: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ParseFailureKind(str, Enum):
    SYNTAX = "syntax"
    UNKNOWN_EVENT_KIND = "unknown_event_kind"


@dataclass
class ParseFailure:
    """A transcript line that could not be turned into an Event.

    Returned by the parser, never raised.
    """
    kind: ParseFailureKind
    detail: str = ""
    line_number: int = 0

    def __str__(self) -> str:
        where = f"line {self.line_number}: " if self.line_number else ""
        return f"{where}{self.kind.value}: {self.detail}"
