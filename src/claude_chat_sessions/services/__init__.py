"""Services for the session engine."""

from claude_chat_sessions.services.config_manager import ConfigManager
from claude_chat_sessions.services.project_catalog import ProjectCatalog
from claude_chat_sessions.services.session_loader import SessionLoader
from claude_chat_sessions.services.session_reconstructor import SessionReconstructor, reconstruct
from claude_chat_sessions.services.transcript_parser import parse_line, stream_transcript

__all__ = [
    "ConfigManager",
    "ProjectCatalog",
    "SessionLoader",
    "SessionReconstructor",
    "reconstruct",
    "parse_line",
    "stream_transcript",
]
