"""Tests for the debug command line."""

import os

import pytest
from click.testing import CliRunner

from claude_chat_sessions.cli import cli
from claude_chat_sessions.services.config_manager import ENV_PROJECTS_DIR

from conftest import PROJECT_DIR_NAME, PROJECT_PATH


@pytest.fixture(autouse=True)
def isolated_settings(qapp, tmp_path, monkeypatch):
    from PySide6.QtCore import QSettings
    monkeypatch.delenv(ENV_PROJECTS_DIR, raising=False)
    QSettings.setDefaultFormat(QSettings.IniFormat)
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path / "config"))


@pytest.fixture
def runner():
    return CliRunner()


def test_projects(runner, tmp_projects_root, tmp_session_file):
    result = runner.invoke(cli, ["--root", str(tmp_projects_root), "projects"])
    assert result.exit_code == 0, result.output
    assert PROJECT_PATH in result.output
    assert "- test-session" in result.output


def test_projects_empty_root(runner, tmp_path):
    root = tmp_path / "empty"
    root.mkdir()
    result = runner.invoke(cli, ["--root", str(root), "projects"])
    assert result.exit_code == 0
    assert "No projects under" in result.output


def test_projects_missing_root(runner, tmp_path):
    result = runner.invoke(cli, ["--root", str(tmp_path / "absent"), "projects"])
    assert result.exit_code == 1
    assert "Storage unavailable" in result.output


def test_projects_root_from_environment(runner, tmp_projects_root, tmp_session_file, monkeypatch):
    monkeypatch.setenv(ENV_PROJECTS_DIR, str(tmp_projects_root))
    result = runner.invoke(cli, ["projects"])
    assert result.exit_code == 0, result.output
    assert PROJECT_PATH in result.output


def test_show(runner, tmp_projects_root, tools_session_path):
    dest = tmp_projects_root / PROJECT_DIR_NAME / "tools.jsonl"
    dest.write_text(tools_session_path.read_text())
    result = runner.invoke(cli, ["--root", str(tmp_projects_root), "show", PROJECT_PATH, "tools"])
    assert result.exit_code == 0, result.output
    assert "Session tools: 8 events" in result.output
    assert "6 run, 1 failed" in result.output
    assert "1 created, 1 modified, 1 deleted" in result.output
    assert "claude-sonnet-4-5, claude-opus-4-6" in result.output


def test_show_reports_parse_failures(runner, tmp_projects_root, malformed_session_path):
    dest = tmp_projects_root / PROJECT_DIR_NAME / "bad.jsonl"
    dest.write_text(malformed_session_path.read_text())
    result = runner.invoke(cli, ["--root", str(tmp_projects_root), "show", PROJECT_PATH, "bad"])
    assert result.exit_code == 0, result.output
    assert "3 lines could not be parsed" in result.output


def test_show_missing_session(runner, tmp_projects_root):
    result = runner.invoke(cli, ["--root", str(tmp_projects_root), "show", PROJECT_PATH, "ghost"])
    assert result.exit_code == 0
    assert "Session ghost: 0 events" in result.output
    assert "Models:         -" in result.output


def test_recent(runner, tmp_projects_root, simple_session_path, tools_session_path):
    project_dir = tmp_projects_root / PROJECT_DIR_NAME
    (project_dir / "a.jsonl").write_text(simple_session_path.read_text())
    (project_dir / "b.jsonl").write_text(tools_session_path.read_text())
    os.utime(project_dir / "a.jsonl", (1_000_000, 1_000_000))
    os.utime(project_dir / "b.jsonl", (2_000_000, 2_000_000))

    result = runner.invoke(cli, ["--root", str(tmp_projects_root), "recent", PROJECT_PATH, "--limit", "1"])
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines == ["b  [8 messages]  Create a config file and clean up the old one."]


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0,
                    reason="permission bits not enforced")
def test_show_unreadable_session(runner, tmp_projects_root, simple_session_path):
    locked = tmp_projects_root / PROJECT_DIR_NAME / "locked.jsonl"
    locked.write_text(simple_session_path.read_text())
    locked.chmod(0)
    try:
        result = runner.invoke(cli, ["--root", str(tmp_projects_root), "show", PROJECT_PATH, "locked"])
    finally:
        locked.chmod(0o644)
    assert result.exit_code == 1
    assert "Storage unavailable" in result.output
    assert not isinstance(result.exception, PermissionError)
