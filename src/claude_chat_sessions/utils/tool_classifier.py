"""Classify tool invocations into file-operation and MCP buckets."""

from dataclasses import dataclass
from enum import Enum


class ToolCategory(str, Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MCP = "mcp"
    OTHER = "other"


DEFAULT_MCP_PREFIXES = ("mcp__",)
DEFAULT_CREATED_KEYWORDS = ("create", "write")
DEFAULT_MODIFIED_KEYWORDS = ("edit", "modify", "replace")
DEFAULT_DELETED_KEYWORDS = ("delete", "remove")
# Names that match a keyword but never touch the filesystem
DEFAULT_IGNORED_TOOLS = ("TodoWrite",)


@dataclass(frozen=True)
class ToolClassifier:
    """Keyword table mapping tool names to categories.

    Matching is a case-insensitive substring test. An MCP prefix wins over
    every keyword; among the file keywords created beats modified beats
    deleted, so ``MultiEdit`` is a modification and ``Write`` a creation.
    """
    mcp_prefixes: tuple[str, ...] = DEFAULT_MCP_PREFIXES
    created_keywords: tuple[str, ...] = DEFAULT_CREATED_KEYWORDS
    modified_keywords: tuple[str, ...] = DEFAULT_MODIFIED_KEYWORDS
    deleted_keywords: tuple[str, ...] = DEFAULT_DELETED_KEYWORDS
    ignored_tools: tuple[str, ...] = DEFAULT_IGNORED_TOOLS

    def classify(self, name: str) -> ToolCategory:
        if not name:
            return ToolCategory.OTHER
        lowered = name.lower()
        if any(lowered.startswith(p.lower()) for p in self.mcp_prefixes if p):
            return ToolCategory.MCP
        if lowered in {t.lower() for t in self.ignored_tools}:
            return ToolCategory.OTHER
        if _contains_any(lowered, self.created_keywords):
            return ToolCategory.CREATED
        if _contains_any(lowered, self.modified_keywords):
            return ToolCategory.MODIFIED
        if _contains_any(lowered, self.deleted_keywords):
            return ToolCategory.DELETED
        return ToolCategory.OTHER

    def extend(self, **extra: tuple[str, ...]) -> "ToolClassifier":
        """Return a copy with additional entries appended to the named tables.

        ``classifier.extend(deleted_keywords=("unlink",))``
        """
        merged = {}
        for table, values in extra.items():
            current = getattr(self, table)
            merged[table] = current + tuple(v for v in values if v not in current)
        return ToolClassifier(**{**self.__dict__, **merged})


def _contains_any(name: str, keywords: tuple[str, ...]) -> bool:
    return any(k and k.lower() in name for k in keywords)
