"""Engine configuration wrapping QSettings."""

import logging
import os
from pathlib import Path

from PySide6.QtCore import QObject, Signal, QSettings

from claude_chat_sessions.utils.tool_classifier import (
    DEFAULT_CREATED_KEYWORDS,
    DEFAULT_DELETED_KEYWORDS,
    DEFAULT_IGNORED_TOOLS,
    DEFAULT_MCP_PREFIXES,
    DEFAULT_MODIFIED_KEYWORDS,
    ToolClassifier,
)

logger = logging.getLogger(__name__)

ORGANIZATION = "claude-chat-sessions"
APPLICATION = "claude-chat-sessions"

# Overrides general/sessionDir when set
ENV_PROJECTS_DIR = "CLAUDE_CODE_PROJECTS_DIR"

# Default values; lists are stored comma-separated
DEFAULTS = {
    "general/sessionDir": "~/.claude/projects",
    "general/transcriptExtension": ".jsonl",
    "general/recentLimit": 10,
    "classifier/mcpPrefixes": ",".join(DEFAULT_MCP_PREFIXES),
    "classifier/createdKeywords": ",".join(DEFAULT_CREATED_KEYWORDS),
    "classifier/modifiedKeywords": ",".join(DEFAULT_MODIFIED_KEYWORDS),
    "classifier/deletedKeywords": ",".join(DEFAULT_DELETED_KEYWORDS),
    "classifier/ignoredTools": ",".join(DEFAULT_IGNORED_TOOLS),
    "session/resumeSubtypes": "resume,resumed,session_resumed",
    "advanced/debugLogging": False,
}


class ConfigManager(QObject):
    """Centralized engine settings."""

    settings_changed = Signal(str)  # key

    def __init__(self, settings_path: str | None = None, parent=None):
        super().__init__(parent)
        if settings_path:
            self._settings = QSettings(settings_path, QSettings.IniFormat)
        else:
            self._settings = QSettings(QSettings.IniFormat, QSettings.UserScope, ORGANIZATION, APPLICATION)

    def get_string(self, key: str) -> str:
        return str(self._settings.value(key, DEFAULTS.get(key, "")))

    def get_int(self, key: str) -> int:
        val = self._settings.value(key, DEFAULTS.get(key, 0))
        try:
            return int(val)
        except (ValueError, TypeError):
            return DEFAULTS.get(key, 0)

    def get_bool(self, key: str) -> bool:
        val = self._settings.value(key, DEFAULTS.get(key, False))
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.lower() in ("true", "1", "yes")
        return bool(val)

    def get_list(self, key: str) -> list[str]:
        val = self._settings.value(key, DEFAULTS.get(key, ""))
        # INI reads "a,b" back as a list and "a" as a str
        if isinstance(val, (list, tuple)):
            items = [str(v) for v in val]
        else:
            items = str(val).split(",")
        return [item.strip() for item in items if item and item.strip()]

    def set_string(self, key: str, value: str):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    def set_int(self, key: str, value: int):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    def set_bool(self, key: str, value: bool):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    def set_list(self, key: str, values: list[str]):
        self._settings.setValue(key, ",".join(v.strip() for v in values if v.strip()))
        self.settings_changed.emit(key)

    def reset(self, key: str):
        """Drop a stored value so the default applies again."""
        self._settings.remove(key)
        self.settings_changed.emit(key)

    def sync(self):
        self._settings.sync()

    # Typed views used to build the engine

    def projects_root(self) -> Path:
        env_value = os.environ.get(ENV_PROJECTS_DIR)
        if env_value:
            return Path(env_value).expanduser()
        return Path(self.get_string("general/sessionDir")).expanduser()

    def transcript_extension(self) -> str:
        return self.get_string("general/transcriptExtension") or ".jsonl"

    def tool_classifier(self) -> ToolClassifier:
        return ToolClassifier(
            mcp_prefixes=tuple(self.get_list("classifier/mcpPrefixes")),
            created_keywords=tuple(self.get_list("classifier/createdKeywords")),
            modified_keywords=tuple(self.get_list("classifier/modifiedKeywords")),
            deleted_keywords=tuple(self.get_list("classifier/deletedKeywords")),
            ignored_tools=tuple(self.get_list("classifier/ignoredTools")),
        )

    def resume_subtypes(self) -> frozenset[str]:
        return frozenset(s.lower() for s in self.get_list("session/resumeSubtypes"))
