"""Shared fixtures for review-orchestra tests."""

from pathlib import Path

import pytest

from review_orchestra.config import BUNDLE_DIR, Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway agent home and the bundled prompts."""
    return Settings(
        claude_dir=tmp_path / ".claude",
        backup_dir=tmp_path / ".claude-backups",
        source_dir=BUNDLE_DIR,
        claude_executable="claude-does-not-exist",
    )


@pytest.fixture
def orchestra_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI's environment at tmp_path and run from an empty directory."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("ORCHESTRA_CLAUDE_DIR", str(tmp_path / ".claude"))
    monkeypatch.setenv("ORCHESTRA_BACKUP_DIR", str(tmp_path / ".claude-backups"))
    monkeypatch.setenv("ORCHESTRA_CLAUDE_BIN", "claude-does-not-exist")
    monkeypatch.delenv("ORCHESTRA_SOURCE_DIR", raising=False)
    return tmp_path
