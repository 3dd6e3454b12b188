"""Tests for backing up and restoring the agent home."""

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from review_orchestra.backups import (
    backup_timestamp,
    create_backup,
    list_backups,
    restore_backup,
)
from review_orchestra.config import Settings
from review_orchestra.errors import BackupNotFoundError


def _populate_home(settings: Settings) -> None:
    (settings.claude_dir / "agents").mkdir(parents=True)
    (settings.claude_dir / "agents" / "pr-reviewer.md").write_text("old reviewer")
    (settings.claude_dir / "CLAUDE.md").write_text("old instructions")


class TestBackupTimestamp:
    def test_iso_timestamp_is_path_safe(self) -> None:
        now = datetime(2025, 6, 1, 9, 30, 12, 345000, tzinfo=timezone.utc)
        assert backup_timestamp(now) == "2025-06-01T09-30-12-345Z"

    def test_converts_to_utc(self) -> None:
        from datetime import timedelta

        now = datetime(2025, 6, 1, 11, 30, 12, tzinfo=timezone(timedelta(hours=2)))
        assert backup_timestamp(now) == "2025-06-01T09-30-12-000Z"


class TestCreateBackup:
    def test_nothing_to_back_up(self, settings: Settings) -> None:
        assert create_backup(settings) is None
        assert not settings.backup_dir.exists()

    def test_copies_agent_home(self, settings: Settings) -> None:
        _populate_home(settings)
        now = datetime(2025, 6, 1, 9, 30, 12, 345000, tzinfo=timezone.utc)

        backup_path = create_backup(settings, now=now)

        assert backup_path == settings.backup_dir / "backup-2025-06-01T09-30-12-345Z"
        assert (backup_path / "agents" / "pr-reviewer.md").read_text() == "old reviewer"
        assert (backup_path / "CLAUDE.md").read_text() == "old instructions"
        # The original stays in place
        assert (settings.claude_dir / "CLAUDE.md").exists()


class TestListBackups:
    def test_no_backup_dir(self, settings: Settings) -> None:
        assert list_backups(settings) == []

    def test_newest_first(self, settings: Settings) -> None:
        for name in (
            "backup-2025-01-01T00-00-00-000Z",
            "backup-2025-03-01T00-00-00-000Z",
            "backup-2025-02-01T00-00-00-000Z",
        ):
            (settings.backup_dir / name).mkdir(parents=True)
        (settings.backup_dir / "notes.txt").write_text("not a backup")

        names = [backup.name for backup in list_backups(settings)]

        assert names == [
            "backup-2025-03-01T00-00-00-000Z",
            "backup-2025-02-01T00-00-00-000Z",
            "backup-2025-01-01T00-00-00-000Z",
        ]

    def test_reports_modification_time(self, settings: Settings) -> None:
        backup = settings.backup_dir / "backup-2025-01-01T00-00-00-000Z"
        backup.mkdir(parents=True)
        stamp = datetime(2025, 1, 1, 12, 0, 0).timestamp()
        os.utime(backup, (stamp, stamp))

        [info] = list_backups(settings)

        assert info.path == backup
        assert info.modified == datetime.fromtimestamp(stamp)


class TestRestoreBackup:
    def test_restore_replaces_home(self, settings: Settings) -> None:
        _populate_home(settings)
        backup_path = create_backup(settings)
        assert backup_path is not None

        (settings.claude_dir / "CLAUDE.md").write_text("new instructions")
        (settings.claude_dir / "extra.md").write_text("added after backup")

        restored = restore_backup(settings, backup_path.name)

        assert restored == settings.claude_dir
        assert (settings.claude_dir / "CLAUDE.md").read_text() == "old instructions"
        assert not (settings.claude_dir / "extra.md").exists()
        # The backup itself is kept
        assert backup_path.exists()

    def test_restore_without_existing_home(self, settings: Settings) -> None:
        backup = settings.backup_dir / "backup-2025-01-01T00-00-00-000Z"
        backup.mkdir(parents=True)
        (backup / "CLAUDE.md").write_text("from backup")

        restore_backup(settings, backup.name)

        assert (settings.claude_dir / "CLAUDE.md").read_text() == "from backup"

    def test_unknown_backup(self, settings: Settings) -> None:
        _populate_home(settings)
        with pytest.raises(BackupNotFoundError, match="Backup not found: backup-nope"):
            restore_backup(settings, "backup-nope")
        # Nothing was removed
        assert (settings.claude_dir / "CLAUDE.md").exists()

    @pytest.mark.parametrize("name", ["../etc", "a/b", "..", ""])
    def test_rejects_path_like_names(self, settings: Settings, name: str) -> None:
        with pytest.raises(ValueError, match="Invalid backup name"):
            restore_backup(settings, name)

    def test_restore_ignores_files_named_like_backups(
        self, settings: Settings, tmp_path: Path
    ) -> None:
        settings.backup_dir.mkdir(parents=True)
        (settings.backup_dir / "backup-file").write_text("not a directory")
        with pytest.raises(BackupNotFoundError):
            restore_backup(settings, "backup-file")

    def test_failed_copy_keeps_current_home(
        self, settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _populate_home(settings)
        backup_path = create_backup(settings)
        assert backup_path is not None
        (settings.claude_dir / "CLAUDE.md").write_text("new instructions")

        def fail_copy(*args, **kwargs):
            raise OSError("No space left on device")

        monkeypatch.setattr("review_orchestra.backups.shutil.copytree", fail_copy)

        with pytest.raises(OSError, match="No space left"):
            restore_backup(settings, backup_path.name)

        assert (settings.claude_dir / "CLAUDE.md").read_text() == "new instructions"
        assert (settings.claude_dir / "agents" / "pr-reviewer.md").exists()
        leftovers = [
            entry.name
            for entry in settings.claude_dir.parent.iterdir()
            if "restore" in entry.name
        ]
        assert leftovers == []

    def test_restore_leaves_no_staging_directory(self, settings: Settings) -> None:
        _populate_home(settings)
        backup_path = create_backup(settings)
        assert backup_path is not None

        restore_backup(settings, backup_path.name)

        assert {entry.name for entry in settings.claude_dir.parent.iterdir()} == {
            settings.backup_dir.name,
            settings.claude_dir.name,
        }
