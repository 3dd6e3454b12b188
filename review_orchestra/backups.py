"""Backup, listing, and restore of the Claude agent home directory.

Backups are full copies of ~/.claude stored side by side:

~/.claude-backups/
├── backup-2025-06-01T09-30-12-345Z/
│   ├── agents/
│   ├── commands/
│   └── CLAUDE.md
└── backup-2025-06-02T17-04-55-010Z/

Names sort chronologically, so the newest backup is the last one
lexically.
"""

import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from review_orchestra.config import Settings
from review_orchestra.errors import BackupNotFoundError

BACKUP_PREFIX = "backup-"


@dataclass
class BackupInfo:
    name: str
    path: Path
    modified: datetime


def backup_timestamp(now: datetime | None = None) -> str:
    """Format a UTC timestamp safe for directory names.

    Matches an ISO-8601 string with milliseconds where ':' and '.' are
    replaced by '-', e.g. 2025-06-01T09-30-12-345Z.
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def create_backup(settings: Settings, now: datetime | None = None) -> Path | None:
    """Copy the agent home into a new timestamped backup.

    Args:
        settings: Paths to back up from and to
        now: Timestamp to name the backup with (defaults to current time)

    Returns:
        Path of the new backup, or None if there was nothing to back up
    """
    if not settings.claude_dir.exists():
        return None

    settings.backup_dir.mkdir(parents=True, exist_ok=True)
    backup_path = settings.backup_dir / f"{BACKUP_PREFIX}{backup_timestamp(now)}"
    shutil.copytree(settings.claude_dir, backup_path, symlinks=True)
    return backup_path


def list_backups(settings: Settings) -> list[BackupInfo]:
    """List backups, newest first.

    Returns:
        BackupInfo entries sorted by name in reverse order
    """
    if not settings.backup_dir.exists():
        return []

    backups = []
    for entry in sorted(settings.backup_dir.iterdir(), reverse=True):
        if not entry.is_dir():
            continue
        modified = datetime.fromtimestamp(entry.stat().st_mtime)
        backups.append(BackupInfo(name=entry.name, path=entry, modified=modified))
    return backups


def restore_backup(settings: Settings, name: str) -> Path:
    """Replace the agent home with the contents of a backup.

    Args:
        settings: Paths to restore into
        name: Backup directory name as shown by list_backups

    Returns:
        Path of the restored agent home

    Raises:
        ValueError: If the name is not a plain directory name
        BackupNotFoundError: If no backup has that name
    """
    backup_path = settings.get_backup_path(name)
    if not backup_path.is_dir():
        raise BackupNotFoundError(f"Backup not found: {name}", backup=name)

    claude_dir = settings.claude_dir
    claude_dir.parent.mkdir(parents=True, exist_ok=True)
    # Copy next to the home first so a failed copy leaves it untouched
    staging = Path(
        tempfile.mkdtemp(prefix=f".{claude_dir.name}-restore-", dir=claude_dir.parent)
    )
    restored = staging / claude_dir.name
    previous = staging / f"{claude_dir.name}.previous"
    try:
        shutil.copytree(backup_path, restored, symlinks=True)
        if claude_dir.exists():
            claude_dir.rename(previous)
        restored.rename(claude_dir)
    except OSError:
        if previous.exists() and not claude_dir.exists():
            previous.rename(claude_dir)
        raise
    finally:
        shutil.rmtree(staging, ignore_errors=True)
    return claude_dir
