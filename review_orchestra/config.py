"""Configuration, constants, and path resolution for the CLI."""

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path

import dotenv
from rich.console import Console

dotenv.load_dotenv()

__version__ = "1.0.0"

# Color scheme
COLORS = {
    "primary": "#10b981",
    "dim": "#6b7280",
    "accent": "#60a5fa",
    "success": "#34d399",
    "warning": "#fbbf24",
    "error": "#f87171",
}

BANNER = "Claude Orchestration System Installer"

# Package data shipped with the CLI
BUNDLE_DIR = Path(__file__).parent / "bundle"

# Files copied next to agents/ and commands/ in the agent home
CONFIG_FILES = ("CLAUDE.md", "mcp-servers.json")

# Tried in order when the claude CLI is missing
CLAUDE_INSTALL_COMMANDS = (
    "npm install -g @anthropic-ai/claude-code",
    "curl -fsSL https://claude.ai/install.sh | sh",
)

# Rich console instance
# Force UTF-8 encoding on Windows to support the status glyphs
if sys.platform == "win32":
    import io

    console = Console(
        highlight=False, file=io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")
    )
else:
    console = Console(highlight=False)


def _looks_like_source_tree(path: Path) -> bool:
    """Check whether a directory holds something installable."""
    return any(
        (path / name).exists() for name in ("agents", "commands", "CLAUDE.md")
    )


def _find_source_dir(start_path: Path | None = None) -> Path:
    """Find the directory to install agents and commands from.

    Uses the given directory (or cwd) when it looks like a source tree,
    otherwise the bundled package data.

    Args:
        start_path: Directory to inspect. Defaults to current working directory.

    Returns:
        Path to the source tree.
    """
    current = Path(start_path or Path.cwd()).resolve()
    if _looks_like_source_tree(current):
        return current
    return BUNDLE_DIR


@dataclass
class Settings:
    """Paths and environment detection for review-orchestra.

    Attributes:
        claude_dir: Agent home the installer writes to (~/.claude)
        backup_dir: Directory holding timestamped backups of the agent home
        source_dir: Tree containing agents/, commands/ and config files
        claude_executable: Name or path of the claude CLI to probe
    """

    claude_dir: Path
    backup_dir: Path
    source_dir: Path
    claude_executable: str = "claude"

    @classmethod
    def from_environment(
        cls, *, source_dir: Path | None = None, start_path: Path | None = None
    ) -> "Settings":
        """Create settings from environment variables and the current directory.

        Args:
            source_dir: Explicit source tree, overrides everything else
            start_path: Directory to start source detection from (defaults to cwd)

        Returns:
            Settings instance with detected configuration
        """
        home = Path.home()
        claude_dir = Path(
            os.environ.get("ORCHESTRA_CLAUDE_DIR") or home / ".claude"
        ).expanduser()
        backup_dir = Path(
            os.environ.get("ORCHESTRA_BACKUP_DIR") or home / ".claude-backups"
        ).expanduser()

        if source_dir is None:
            env_source = os.environ.get("ORCHESTRA_SOURCE_DIR")
            if env_source:
                source_dir = Path(env_source).expanduser()
            else:
                source_dir = _find_source_dir(start_path)

        return cls(
            claude_dir=claude_dir,
            backup_dir=backup_dir,
            source_dir=Path(source_dir),
            claude_executable=os.environ.get("ORCHESTRA_CLAUDE_BIN", "claude"),
        )

    @property
    def agents_dir(self) -> Path:
        """Installed agents directory (~/.claude/agents)."""
        return self.claude_dir / "agents"

    @property
    def commands_dir(self) -> Path:
        """Installed commands directory (~/.claude/commands)."""
        return self.claude_dir / "commands"

    @property
    def uses_bundle(self) -> bool:
        """Check if the source tree is the bundled package data."""
        return self.source_dir.resolve() == BUNDLE_DIR.resolve()

    def get_agent_path(self, agent_name: str) -> Path:
        """Get the installed path of an agent prompt.

        Args:
            agent_name: Agent name without the .md suffix

        Returns:
            Path to ~/.claude/agents/{agent_name}.md
        """
        return self.agents_dir / f"{agent_name}.md"

    @staticmethod
    def _is_valid_backup_name(name: str) -> bool:
        """Reject names that would escape the backup directory."""
        if not name or not name.strip() or name in (".", ".."):
            return False
        return bool(re.match(r"^[A-Za-z0-9_.\-]+$", name))

    def get_backup_path(self, name: str) -> Path:
        """Get the path of a named backup.

        Args:
            name: Backup directory name (e.g. backup-2025-01-01T00-00-00-000Z)

        Returns:
            Path inside the backup directory
        """
        if not self._is_valid_backup_name(name):
            msg = (
                f"Invalid backup name: {name!r}. "
                "Backup names can only contain letters, numbers, dots, hyphens and underscores."
            )
            raise ValueError(msg)
        return self.backup_dir / name
