"""Main entry point for the review-orchestra CLI.

Installs the PR reviewer agent and its companion command and config into
the Claude agent home, manages backups of that directory, and offers
helpers around the review summary format the agent produces.

Key Functions:
- parse_args(): Parse command-line arguments
- run(): Dispatch a parsed command and return an exit code
- cli_main(): Console script entry point
"""

import argparse
import sys
from pathlib import Path

from review_orchestra.backups import list_backups, restore_backup
from review_orchestra.config import COLORS, Settings, __version__, console
from review_orchestra.doctor import run_doctor
from review_orchestra.errors import ErrorHandler, OrchestraError
from review_orchestra.installer import InstallOptions, Installer
from review_orchestra.prompt_check import check_path
from review_orchestra.summary import (
    ArchitectureImpact,
    Recommendation,
    ReviewSummary,
    RiskLevel,
    parse_summary,
    render_summary,
    summary_template,
)
from review_orchestra.ui import (
    print_backups,
    print_error,
    print_markdown_source,
    print_reports,
    show_help,
)


def _setup_summary_parser(subparsers) -> None:
    summary_parser = subparsers.add_parser(
        "summary", help="Render or validate PR review summaries"
    )
    summary_subparsers = summary_parser.add_subparsers(
        dest="summary_command", help="Summary command"
    )

    summary_subparsers.add_parser("template", help="Print the blank summary template")

    render_parser = summary_subparsers.add_parser(
        "render", help="Render a summary from fields"
    )
    render_parser.add_argument("--scope", required=True, help="What the PR touches")
    render_parser.add_argument(
        "--risk",
        required=True,
        help=f"Risk level ({RiskLevel.choices_text()})",
    )
    render_parser.add_argument(
        "--impact",
        required=True,
        help=f"Architecture impact ({ArchitectureImpact.choices_text()})",
    )
    render_parser.add_argument(
        "--finding",
        dest="findings",
        action="append",
        default=[],
        help="Key finding (repeatable)",
    )
    render_parser.add_argument(
        "--recommendation",
        required=True,
        help=f"Recommendation ({Recommendation.choices_text()})",
    )
    render_parser.add_argument("--next-steps", required=True, help="Next steps")

    validate_parser = summary_subparsers.add_parser(
        "validate", help="Parse and validate a summary"
    )
    validate_parser.add_argument(
        "file", help="Markdown file containing a summary, or '-' for stdin"
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="orchestra",
        description="Install and manage the Claude PR review orchestration system",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Install command
    install_parser = subparsers.add_parser(
        "install", help="Install agents and commands to ~/.claude"
    )
    install_parser.add_argument(
        "--backup-only",
        action="store_true",
        help="Only create backup, skip installation",
    )
    install_parser.add_argument(
        "--force",
        action="store_true",
        help="Force installation without prompts",
    )
    install_parser.add_argument(
        "--skip-claude-install",
        action="store_true",
        help="Skip Claude Code installation check",
    )
    install_parser.add_argument(
        "--source",
        type=Path,
        help="Directory with agents/, commands/ and CLAUDE.md (default: bundled prompts)",
    )

    subparsers.add_parser("backup", help="Create backup of current installation")
    subparsers.add_parser("list-backups", help="List available backups")

    restore_parser = subparsers.add_parser("restore", help="Restore from backup")
    restore_parser.add_argument("backup_name", help="Name of backup to restore")

    # Check command - prompt structure validation
    check_parser = subparsers.add_parser("check", help="Check prompt files")
    check_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Prompt files or source directories (default: the source tree)",
    )

    _setup_summary_parser(subparsers)

    subparsers.add_parser("doctor", help="Validate installation")
    subparsers.add_parser("help", help="Show help information")

    return parser.parse_args(argv)


def _execute_install_command(args: argparse.Namespace) -> int:
    settings = Settings.from_environment(source_dir=args.source)
    if args.source is not None and not args.source.is_dir():
        raise ValueError(f"Source directory not found: {args.source}")

    options = InstallOptions(
        backup_only=args.backup_only,
        force=args.force,
        skip_claude_install=args.skip_claude_install,
    )
    result = Installer(settings).install(options)
    return 1 if result.cancelled else 0


def _execute_restore_command(args: argparse.Namespace) -> int:
    settings = Settings.from_environment()
    with console.status(f"Restoring backup: {args.backup_name}...", spinner="dots"):
        restore_backup(settings, args.backup_name)
    console.print(f"[green]✓[/green] Backup restored: {args.backup_name}")
    return 0


def _execute_check_command(args: argparse.Namespace) -> int:
    paths = args.paths or [Settings.from_environment().source_dir]
    reports = []
    for path in paths:
        reports.extend(check_path(path))
    print_reports(reports)
    return 0 if reports and all(report.ok for report in reports) else 1


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def _execute_summary_command(args: argparse.Namespace) -> int:
    command = args.summary_command

    if command == "template":
        console.print(summary_template(), markup=False, soft_wrap=True, end="")
        return 0

    if command == "render":
        summary = ReviewSummary.create(
            scope=args.scope,
            risk_level=args.risk,
            architecture_impact=args.impact,
            recommendation=args.recommendation,
            next_steps=args.next_steps,
            key_findings=args.findings,
        )
        console.print(render_summary(summary), markup=False, soft_wrap=True, end="")
        return 0

    if command == "validate":
        summary = parse_summary(_read_input(args.file))
        console.print("[green]✓ Summary is valid[/green]\n")
        print_markdown_source(render_summary(summary))
        return 0

    console.print("[yellow]⚠ Specify a summary command: template, render or validate[/yellow]")
    return 1


def run(args: argparse.Namespace) -> int:
    """Run a parsed command.

    Returns:
        Process exit code
    """
    try:
        if args.command == "install":
            return _execute_install_command(args)
        if args.command == "backup":
            settings = Settings.from_environment()
            Installer(settings).install(
                InstallOptions(backup_only=True, skip_claude_install=True)
            )
            return 0
        if args.command == "list-backups":
            print_backups(list_backups(Settings.from_environment()))
            return 0
        if args.command == "restore":
            return _execute_restore_command(args)
        if args.command == "check":
            return _execute_check_command(args)
        if args.command == "summary":
            return _execute_summary_command(args)
        if args.command == "doctor":
            return run_doctor()
        show_help()
        return 0
    except (OrchestraError, OSError, ValueError) as e:
        print_error(ErrorHandler().handle(e))
        return 1


def cli_main(argv: list[str] | None = None) -> None:
    """Entry point for console script."""
    try:
        sys.exit(run(parse_args(argv)))
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - suppress ugly traceback
        console.print("\n\n[yellow]Interrupted[/yellow]", style=COLORS["dim"])
        sys.exit(0)


if __name__ == "__main__":
    cli_main()
