"""Installation of agents, commands and config into the Claude agent home.

An install runs these steps, each behind a spinner:

1. Check for the claude CLI and install it if missing (optional)
2. Back up the existing agent home
3. Copy agents/ and commands/ from the source tree
4. Copy CLAUDE.md and mcp-servers.json

A failing step is reported and re-raised as InstallError, leaving the
backup from step 2 available for 'orchestra restore'.
"""

import shutil
import subprocess
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from review_orchestra.backups import create_backup
from review_orchestra.config import (
    BANNER,
    CLAUDE_INSTALL_COMMANDS,
    COLORS,
    CONFIG_FILES,
    Settings,
    console,
)
from review_orchestra.errors import (
    ClaudeNotInstalledError,
    InstallError,
    OrchestraError,
    PromptCheckError,
)
from review_orchestra.prompt_check import split_frontmatter


@dataclass
class InstallOptions:
    """Flags accepted by the install command."""

    backup_only: bool = False
    force: bool = False
    skip_claude_install: bool = False


@dataclass
class InstallResult:
    """What an install run did."""

    backup_path: Path | None = None
    agents: int = 0
    commands: int = 0
    config_files: list[str] = field(default_factory=list)
    cancelled: bool = False


def _default_confirm(message: str) -> bool:
    from prompt_toolkit import prompt

    answer = prompt(f"{message} [y/N]: ").strip().lower()
    return answer in ("y", "yes")


def _count_markdown(directory: Path) -> int:
    return sum(1 for path in directory.iterdir() if path.suffix == ".md")


def discover_commands(commands_dir: Path) -> list[tuple[str, str]]:
    """List slash commands provided by markdown files.

    Nested files map to namespaced commands, so commands/project/deploy.md
    becomes /project:deploy.

    Returns:
        Sorted (command, description) pairs
    """
    if not commands_dir.is_dir():
        return []

    commands = []
    for path in sorted(commands_dir.rglob("*.md")):
        relative = path.relative_to(commands_dir).with_suffix("")
        name = "/" + ":".join(relative.parts)
        try:
            frontmatter, _ = split_frontmatter(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, PromptCheckError):
            frontmatter = {}
        commands.append((name, str(frontmatter.get("description") or "")))
    return commands


class Installer:
    """Installs a source tree of prompts into the Claude agent home."""

    def __init__(
        self,
        settings: Settings,
        *,
        interactive: bool | None = None,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        self.settings = settings
        self.interactive = sys.stdin.isatty() if interactive is None else interactive
        self._confirm = confirm or _default_confirm

    @contextmanager
    def _step(self, message: str) -> Iterator[None]:
        """Run one install step behind a spinner, wrapping failures."""
        with console.status(message, spinner="dots"):
            try:
                yield
            except OrchestraError:
                console.print(f"[red]✗ {message.rstrip('.')} failed[/red]")
                raise
            except OSError as e:
                console.print(f"[red]✗ {message.rstrip('.')} failed[/red]")
                raise InstallError(f"{message.rstrip('.')} failed: {e}", step=message) from e

    def _succeed(self, message: str) -> None:
        console.print(f"[green]✓[/green] {message}")

    def _warn(self, message: str) -> None:
        console.print(f"[yellow]⚠ {message}[/yellow]")

    def install(self, options: InstallOptions | None = None) -> InstallResult:
        """Run a full installation.

        Args:
            options: Install flags (defaults to a full install)

        Returns:
            InstallResult describing what was copied
        """
        options = options or InstallOptions()
        result = InstallResult()

        console.print(f"[bold {COLORS['accent']}]{BANNER}[/bold {COLORS['accent']}]\n")

        if not options.skip_claude_install:
            self.check_and_install_claude()

        if not options.backup_only and not self._confirm_overwrite(options):
            console.print("[yellow]Installation cancelled.[/yellow]")
            result.cancelled = True
            return result

        result.backup_path = self.create_backup()

        if options.backup_only:
            console.print("[green]✓ Backup completed successfully[/green]")
            return result

        result.agents = self.install_agents()
        result.commands = self.install_commands()
        result.config_files = self.install_config()

        console.print("\n[bold green]🎉 Installation completed successfully![/bold green]")
        self.show_available_commands()
        return result

    def _confirm_overwrite(self, options: InstallOptions) -> bool:
        """Ask before overwriting an existing agent home."""
        claude_dir = self.settings.claude_dir
        if options.force or not self.interactive:
            return True
        if not claude_dir.exists() or not any(claude_dir.iterdir()):
            return True
        console.print(
            f"[yellow]⚠ {claude_dir} already exists. "
            "Agents, commands and config will be overwritten (a backup is made first).[/yellow]"
        )
        return self._confirm("Continue?")

    def _claude_available(self) -> bool:
        try:
            subprocess.run(
                [self.settings.claude_executable, "--version"],
                capture_output=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError):
            return False
        return True

    def check_and_install_claude(self) -> str:
        """Make sure the claude CLI is available.

        Returns:
            "present" if it was already installed, otherwise the install
            command that succeeded

        Raises:
            ClaudeNotInstalledError: If every install method failed
        """
        with console.status("Checking Claude Code installation...", spinner="dots") as status:
            if self._claude_available():
                self._succeed("Claude Code is already installed")
                return "present"

            status.update("Installing Claude Code...")
            for command in CLAUDE_INSTALL_COMMANDS:
                try:
                    subprocess.run(command, shell=True, capture_output=True, check=True)
                except (OSError, subprocess.CalledProcessError):
                    continue
                via = command.split()[0]
                self._succeed(f"Claude Code installed via {via}")
                return command

        console.print("[red]✗ Failed to install Claude Code automatically[/red]")
        raise ClaudeNotInstalledError(
            "Claude Code installation required",
            command=self.settings.claude_executable,
        )

    def create_backup(self) -> Path | None:
        """Back up the existing agent home, if there is one."""
        with self._step("Creating backup of existing installation..."):
            backup_path = create_backup(self.settings)
        if backup_path is None:
            self._succeed("No existing installation found")
        else:
            self._succeed(f"Backup created: {backup_path}")
        return backup_path

    def _install_directory(self, name: str) -> int:
        source = self.settings.source_dir / name
        target = self.settings.claude_dir / name

        with self._step(f"Installing {name}..."):
            target.mkdir(parents=True, exist_ok=True)
            if not source.is_dir():
                self._warn(f"No {name} directory found in {self.settings.source_dir}")
                return 0
            shutil.copytree(source, target, dirs_exist_ok=True)
            count = _count_markdown(source)

        self._succeed(f"Installed {count} {name}")
        return count

    def install_agents(self) -> int:
        """Copy agents/ into the agent home.

        Returns:
            Number of agent markdown files in the source
        """
        return self._install_directory("agents")

    def install_commands(self) -> int:
        """Copy commands/ into the agent home.

        Returns:
            Number of command markdown files in the source
        """
        return self._install_directory("commands")

    def install_config(self) -> list[str]:
        """Copy CLAUDE.md and mcp-servers.json when the source has them.

        Returns:
            Names of the files copied
        """
        copied = []
        with self._step("Installing configuration..."):
            self.settings.claude_dir.mkdir(parents=True, exist_ok=True)
            for name in CONFIG_FILES:
                source = self.settings.source_dir / name
                if source.is_file():
                    shutil.copy2(source, self.settings.claude_dir / name)
                    copied.append(name)
        self._succeed("Configuration installed")
        return copied

    def show_available_commands(self) -> None:
        """Print the slash commands now installed."""
        commands = discover_commands(self.settings.commands_dir)
        if not commands:
            return

        console.print(f"\n[{COLORS['accent']}]Available commands:[/{COLORS['accent']}]")
        width = max(len(name) for name, _ in commands) + 2
        for name, description in commands:
            line = f"  {name.ljust(width)}"
            if description:
                line += f"- {description}"
            console.print(line, markup=False)
