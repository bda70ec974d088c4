"""Project and session discovery over the transcript storage root."""

import logging
import stat as stat_mod
from pathlib import Path

from claude_chat_sessions.errors import StorageUnavailableError
from claude_chat_sessions.types.sessions import Project, SessionSummary
from claude_chat_sessions.utils.path_codec import (
    decode_path,
    encode_path,
    extract_project_name,
)

logger = logging.getLogger(__name__)

CLAUDE_PROJECTS_DIR = Path.home() / ".claude" / "projects"
TRANSCRIPT_EXTENSION = ".jsonl"


def is_session_id(session_id: str) -> bool:
    """True when the id names a file directly inside a project directory."""
    return bool(session_id) and not any(sep in session_id for sep in ("/", "\\", "\0"))


class ProjectCatalog:
    """Lists projects and their session files without reading transcripts.

    Listing order follows the filesystem; sort the result if you need a
    stable order.
    """

    def __init__(
        self,
        projects_root: str | Path | None = None,
        transcript_extension: str = TRANSCRIPT_EXTENSION,
    ):
        self._projects_root = Path(projects_root).expanduser() if projects_root else CLAUDE_PROJECTS_DIR
        if not transcript_extension.startswith("."):
            transcript_extension = "." + transcript_extension
        self._extension = transcript_extension

    @property
    def projects_root(self) -> Path:
        return self._projects_root

    @property
    def transcript_extension(self) -> str:
        return self._extension

    def list_projects(self) -> list[Project]:
        """Enumerate project directories under the root.

        Raises StorageUnavailableError when the root (or a project directory)
        cannot be listed.
        """
        root = self._projects_root
        try:
            if not root.is_dir():
                raise StorageUnavailableError(root, "not a directory")
            entries = list(root.iterdir())
        except OSError as e:
            raise StorageUnavailableError(root, e.strerror or str(e)) from e

        projects = []
        for entry in entries:
            if not entry.is_dir():
                continue
            project_id = entry.name
            projects.append(Project(
                id=project_id,
                path=decode_path(project_id),
                name=extract_project_name(project_id),
                sessions=self.list_sessions(entry),
            ))

        logger.debug("Found %d projects under %s", len(projects), root)
        return projects

    def list_sessions(self, project_dir: str | Path) -> list[SessionSummary]:
        """List transcript files directly inside one project directory."""
        project_dir = Path(project_dir)
        try:
            entries = list(project_dir.iterdir())
        except FileNotFoundError:
            logger.warning("Project directory does not exist: %s", project_dir)
            return []
        except OSError as e:
            raise StorageUnavailableError(project_dir, e.strerror or str(e)) from e

        sessions = []
        for entry in entries:
            if entry.suffix != self._extension:
                continue
            try:
                stat = entry.stat()
            except OSError:
                # Removed between listing and stat
                logger.debug("Skipping vanished transcript %s", entry)
                continue
            if not stat_mod.S_ISREG(stat.st_mode):
                continue
            sessions.append(SessionSummary(
                id=entry.stem,
                file_path=str(entry),
                file_size=stat.st_size,
                modified_at=stat.st_mtime,
            ))
        return sessions

    def project_dir_for(self, project_path: str) -> Path:
        """Directory holding a project's transcripts.

        Tries the plain encoding first, then the dot-folded one; returns the
        plain candidate when neither exists.
        """
        plain = self._projects_root / encode_path(project_path)
        if plain.is_dir():
            return plain
        folded = self._projects_root / encode_path(project_path, fold_dots=True)
        if folded != plain and folded.is_dir():
            return folded
        return plain

    def transcript_path(self, project_path: str, session_id: str) -> Path:
        if not is_session_id(session_id):
            raise ValueError(f"Not a session id: {session_id!r}")
        return self.project_dir_for(project_path) / f"{session_id}{self._extension}"
