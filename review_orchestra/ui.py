"""UI rendering and display utilities for the CLI."""

from rich.markup import escape
from rich.syntax import Syntax

from review_orchestra.backups import BackupInfo
from review_orchestra.config import BANNER, COLORS, console
from review_orchestra.errors import RecoveryResult
from review_orchestra.prompt_check import PromptReport


def show_help() -> None:
    """Show help information."""
    console.print()
    console.print(BANNER, style=f"bold {COLORS['primary']}")
    console.print()

    console.print("[bold]Usage:[/bold]", style=COLORS["primary"])
    console.print("  orchestra install [OPTIONS]          Install agents and commands to ~/.claude")
    console.print("  orchestra backup                     Create backup of current installation")
    console.print("  orchestra list-backups               List available backups")
    console.print("  orchestra restore NAME               Restore from backup")
    console.print("  orchestra check [PATH ...]           Check prompt files")
    console.print("  orchestra summary template           Print the blank review summary")
    console.print("  orchestra summary render [FIELDS]    Render a review summary")
    console.print("  orchestra summary validate FILE      Validate a review summary")
    console.print("  orchestra doctor                     Validate installation")
    console.print("  orchestra help                       Show this help message")
    console.print()

    console.print("[bold]Install options:[/bold]", style=COLORS["primary"])
    console.print("  --backup-only                 Only create backup, skip installation")
    console.print("  --force                       Overwrite without asking")
    console.print("  --skip-claude-install         Skip Claude Code installation check")
    console.print("  --source DIR                  Install from DIR instead of the bundled prompts")
    console.print()

    console.print("[bold]Examples:[/bold]", style=COLORS["primary"])
    console.print(
        "  orchestra install --skip-claude-install   # Install bundled reviewer",
        style=COLORS["dim"],
    )
    console.print(
        "  orchestra restore backup-2025-06-01T09-30-12-345Z",
        style=COLORS["dim"],
    )
    console.print(
        "  orchestra summary validate reply.md       # Check an agent's summary",
        style=COLORS["dim"],
    )
    console.print()


def print_backups(backups: list[BackupInfo]) -> None:
    """Print backups newest first."""
    if not backups:
        console.print("[yellow]No backups found[/yellow]")
        return

    console.print(f"[bold {COLORS['accent']}]Available backups:[/bold {COLORS['accent']}]\n")
    for backup in backups:
        modified = backup.modified.strftime("%Y-%m-%d %H:%M:%S")
        console.print(f"  {escape(backup.name)} [dim]({modified})[/dim]")


def print_reports(reports: list[PromptReport]) -> None:
    """Print prompt check results, one block per file."""
    if not reports:
        console.print("[yellow]⚠ No prompt files found[/yellow]")
        return

    for report in reports:
        if report.ok:
            console.print(f"[green]✓[/green] {escape(str(report.path))} [dim]({report.kind})[/dim]")
        else:
            console.print(f"[red]✗[/red] {escape(str(report.path))} [dim]({report.kind})[/dim]")
        for issue in report.errors:
            console.print(f"    [red]error:[/red] {escape(issue.message)}")
        for issue in report.warnings:
            console.print(f"    [yellow]warning:[/yellow] {escape(issue.message)}")

    failed = sum(1 for report in reports if not report.ok)
    console.print()
    if failed:
        console.print(f"[bold red]{failed} of {len(reports)} file(s) failed[/bold red]")
    else:
        console.print(f"[bold green]All {len(reports)} file(s) passed[/bold green]")


def print_markdown_source(text: str) -> None:
    """Print markdown source with highlighting."""
    console.print(Syntax(text.rstrip("\n"), "markdown", theme="monokai", word_wrap=True))


def print_error(result: RecoveryResult) -> None:
    """Print a failed command's message and suggestion."""
    console.print(f"[red]❌ {escape(result.message)}[/red]")
    if result.suggestion:
        console.print(escape(result.suggestion), style=COLORS["dim"])
