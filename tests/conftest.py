"""Shared test fixtures for the session engine."""

import sys
from pathlib import Path

import pytest

from claude_chat_sessions.services.project_catalog import ProjectCatalog
from claude_chat_sessions.services.session_loader import SessionLoader

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PROJECT_PATH = "/home/wiz/projects/myapp"
PROJECT_DIR_NAME = "-home-wiz-projects-myapp"


@pytest.fixture(scope="session")
def qapp():
    """Create a QCoreApplication for tests that need Qt."""
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv or ["test"])
    yield app


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def simple_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "simple_session.jsonl"


@pytest.fixture
def tools_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "session_with_tools.jsonl"


@pytest.fixture
def malformed_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "malformed_session.jsonl"


@pytest.fixture
def checkpoints_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "session_with_checkpoints.jsonl"


@pytest.fixture
def tmp_projects_root(tmp_path) -> Path:
    """Create a temporary projects directory with one empty project."""
    projects_dir = tmp_path / ".claude" / "projects"
    (projects_dir / PROJECT_DIR_NAME).mkdir(parents=True)
    return projects_dir


@pytest.fixture
def tmp_session_file(tmp_projects_root, simple_session_path) -> Path:
    """Copy the simple session into the temporary project."""
    dest = tmp_projects_root / PROJECT_DIR_NAME / "test-session.jsonl"
    dest.write_text(simple_session_path.read_text())
    return dest


@pytest.fixture
def loader(tmp_projects_root) -> SessionLoader:
    return SessionLoader(ProjectCatalog(tmp_projects_root))
