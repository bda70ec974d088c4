"""Central session loading orchestrator."""

import logging
from typing import TYPE_CHECKING, Iterable

from claude_chat_sessions.errors import StorageUnavailableError
from claude_chat_sessions.services.project_catalog import ProjectCatalog, is_session_id
from claude_chat_sessions.services.session_reconstructor import SessionReconstructor
from claude_chat_sessions.services.transcript_parser import extract_preview, stream_transcript
from claude_chat_sessions.types.sessions import Project, Session, SessionSummary
from claude_chat_sessions.utils.tool_classifier import ToolClassifier

if TYPE_CHECKING:
    from claude_chat_sessions.services.config_manager import ConfigManager

logger = logging.getLogger(__name__)


class SessionLoader:
    """Answers "which projects exist" and "load this session".

    Holds only configuration; every load builds its own reconstructor and
    returns a Session the caller owns.
    """

    def __init__(
        self,
        catalog: ProjectCatalog,
        classifier: ToolClassifier | None = None,
        resume_subtypes: Iterable[str] | None = None,
    ):
        self._catalog = catalog
        self._classifier = classifier or ToolClassifier()
        self._resume_subtypes = frozenset(resume_subtypes) if resume_subtypes is not None else None

    @classmethod
    def from_config(cls, config: "ConfigManager") -> "SessionLoader":
        catalog = ProjectCatalog(
            projects_root=config.projects_root(),
            transcript_extension=config.transcript_extension(),
        )
        return cls(
            catalog,
            classifier=config.tool_classifier(),
            resume_subtypes=config.resume_subtypes(),
        )

    @property
    def catalog(self) -> ProjectCatalog:
        return self._catalog

    def list_projects(self) -> list[Project]:
        return self._catalog.list_projects()

    def load_session(self, project_path: str, session_id: str) -> Session:
        """Read a transcript and fold it into a new Session.

        A missing transcript is a valid, empty session. Unparseable lines are
        recorded on ``Session.parse_failures`` and skipped. Raises
        StorageUnavailableError when the transcript exists but cannot be read.
        """
        reconstructor = SessionReconstructor(
            session_id,
            project_path=project_path,
            classifier=self._classifier,
            resume_subtypes=self._resume_subtypes,
        )
        if not is_session_id(session_id):
            logger.warning("Not a session id: %r", session_id)
            return reconstructor.session

        transcript = self._catalog.transcript_path(project_path, session_id)

        if not transcript.is_file():
            logger.warning("Session file does not exist: %s", transcript)
            return reconstructor.session

        try:
            for _, outcome in stream_transcript(transcript):
                reconstructor.feed_outcome(outcome)
        except OSError as e:
            raise StorageUnavailableError(transcript, e.strerror or str(e)) from e

        session = reconstructor.session
        if session.parse_failures:
            logger.info(
                "Loaded %d events from %s, %d lines could not be parsed",
                len(session.events), transcript.name, session.parse_error_count,
            )
        else:
            logger.info("Loaded %d events from %s", len(session.events), transcript.name)
        return session

    def recent_sessions(self, project_path: str, limit: int = 10) -> list[SessionSummary]:
        """Most recently modified sessions of a project, with previews."""
        project_dir = self._catalog.project_dir_for(project_path)
        if not project_dir.exists():
            logger.warning("Project directory does not exist: %s", project_dir)
            return []

        sessions = self._catalog.list_sessions(project_dir)
        sessions.sort(key=lambda s: s.modified_at, reverse=True)
        recent = sessions[:max(0, limit)]
        for summary in recent:
            try:
                summary.preview, summary.message_count = extract_preview(summary.file_path)
            except OSError as e:
                logger.debug("No preview for %s: %s", summary.file_path, e)
        return recent
