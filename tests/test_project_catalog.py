"""Tests for claude_chat_sessions.services.project_catalog."""

import os

import pytest

from claude_chat_sessions.errors import StorageUnavailableError
from claude_chat_sessions.services.project_catalog import ProjectCatalog

from conftest import PROJECT_DIR_NAME, PROJECT_PATH


def _touch(path, text="{}\n"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


# ---------------------------------------------------------------------------
# 1. Listing projects
# ---------------------------------------------------------------------------

class TestListProjects:
    def test_single_project(self, tmp_projects_root, tmp_session_file):
        catalog = ProjectCatalog(tmp_projects_root)
        projects = catalog.list_projects()
        assert len(projects) == 1
        project = projects[0]
        assert project.id == PROJECT_DIR_NAME
        assert project.path == PROJECT_PATH
        assert project.name == "myapp"
        assert project.session_ids == ["test-session"]

    def test_session_summary_fields(self, tmp_projects_root, tmp_session_file):
        summary = ProjectCatalog(tmp_projects_root).list_projects()[0].sessions[0]
        assert summary.file_path == str(tmp_session_file)
        assert summary.file_size == tmp_session_file.stat().st_size
        assert summary.modified_at == pytest.approx(tmp_session_file.stat().st_mtime)
        assert summary.preview == ""
        assert summary.message_count == 0

    def test_empty_project_has_no_sessions(self, tmp_projects_root):
        projects = ProjectCatalog(tmp_projects_root).list_projects()
        assert [p.sessions for p in projects] == [[]]

    def test_empty_root(self, tmp_path):
        root = tmp_path / "projects"
        root.mkdir()
        assert ProjectCatalog(root).list_projects() == []

    def test_plain_files_at_root_are_not_projects(self, tmp_projects_root):
        _touch(tmp_projects_root / "stray.jsonl")
        projects = ProjectCatalog(tmp_projects_root).list_projects()
        assert [p.id for p in projects] == [PROJECT_DIR_NAME]

    def test_listing_is_idempotent(self, tmp_projects_root):
        for name in ("-a-one", "-b-two", "-c-three"):
            _touch(tmp_projects_root / name / "s1.jsonl")
        catalog = ProjectCatalog(tmp_projects_root)
        first = {(p.id, tuple(sorted(p.session_ids))) for p in catalog.list_projects()}
        second = {(p.id, tuple(sorted(p.session_ids))) for p in catalog.list_projects()}
        assert first == second
        assert len(first) == 4

    def test_decoded_path_need_not_exist(self, tmp_projects_root):
        (tmp_projects_root / "-nowhere-at-all").mkdir()
        paths = {p.path for p in ProjectCatalog(tmp_projects_root).list_projects()}
        assert "/nowhere/at/all" in paths


# ---------------------------------------------------------------------------
# 2. Storage unavailable
# ---------------------------------------------------------------------------

class TestStorageUnavailable:
    def test_missing_root(self, tmp_path):
        catalog = ProjectCatalog(tmp_path / "absent")
        with pytest.raises(StorageUnavailableError) as excinfo:
            catalog.list_projects()
        assert excinfo.value.path == str(tmp_path / "absent")

    def test_root_is_a_file(self, tmp_path):
        root = _touch(tmp_path / "projects")
        with pytest.raises(StorageUnavailableError):
            ProjectCatalog(root).list_projects()

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0,
                        reason="permission bits not enforced")
    def test_unreadable_root(self, tmp_path):
        root = tmp_path / "projects"
        root.mkdir()
        root.chmod(0)
        try:
            with pytest.raises(StorageUnavailableError):
                ProjectCatalog(root).list_projects()
        finally:
            root.chmod(0o755)


# ---------------------------------------------------------------------------
# 3. Listing sessions
# ---------------------------------------------------------------------------

class TestListSessions:
    def test_only_transcripts_listed(self, tmp_projects_root):
        project_dir = tmp_projects_root / PROJECT_DIR_NAME
        _touch(project_dir / "a.jsonl")
        _touch(project_dir / "b.jsonl")
        _touch(project_dir / "notes.txt")
        _touch(project_dir / "a.jsonl.bak")
        (project_dir / "subdir.jsonl").mkdir()
        _touch(project_dir / "nested" / "c.jsonl")

        ids = sorted(s.id for s in ProjectCatalog(tmp_projects_root).list_sessions(project_dir))
        assert ids == ["a", "b"]

    def test_missing_project_dir(self, tmp_projects_root):
        catalog = ProjectCatalog(tmp_projects_root)
        assert catalog.list_sessions(tmp_projects_root / "-gone") == []

    def test_custom_extension(self, tmp_projects_root):
        project_dir = tmp_projects_root / PROJECT_DIR_NAME
        _touch(project_dir / "a.jsonl")
        _touch(project_dir / "b.log")
        catalog = ProjectCatalog(tmp_projects_root, transcript_extension="log")
        assert catalog.transcript_extension == ".log"
        assert [s.id for s in catalog.list_sessions(project_dir)] == ["b"]


# ---------------------------------------------------------------------------
# 4. Locating transcripts
# ---------------------------------------------------------------------------

class TestTranscriptPath:
    def test_plain_encoding(self, tmp_projects_root):
        catalog = ProjectCatalog(tmp_projects_root)
        assert catalog.transcript_path(PROJECT_PATH, "abc") == (
            tmp_projects_root / PROJECT_DIR_NAME / "abc.jsonl"
        )

    def test_dot_folded_fallback(self, tmp_projects_root):
        folded = tmp_projects_root / "-src-github-com-org-repo"
        folded.mkdir()
        catalog = ProjectCatalog(tmp_projects_root)
        assert catalog.project_dir_for("/src/github.com/org/repo") == folded

    def test_plain_wins_over_folded(self, tmp_projects_root):
        plain = tmp_projects_root / "-src-github.com-org-repo"
        plain.mkdir()
        (tmp_projects_root / "-src-github-com-org-repo").mkdir()
        catalog = ProjectCatalog(tmp_projects_root)
        assert catalog.project_dir_for("/src/github.com/org/repo") == plain

    def test_neither_exists_returns_plain(self, tmp_projects_root):
        catalog = ProjectCatalog(tmp_projects_root)
        assert catalog.project_dir_for("/x.y/z") == tmp_projects_root / "-x.y-z"

    @pytest.mark.parametrize("session_id", ["../other/x", "a\\b", ""])
    def test_rejects_ids_outside_project(self, tmp_projects_root, session_id):
        catalog = ProjectCatalog(tmp_projects_root)
        with pytest.raises(ValueError):
            catalog.transcript_path(PROJECT_PATH, session_id)


def test_default_root_is_under_home():
    assert ProjectCatalog().projects_root.parts[-2:] == (".claude", "projects")
