"""Setup validation command for review-orchestra.

Checks the claude CLI, the agent home, and the installed reviewer prompt.
"""

import shutil

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from review_orchestra.backups import list_backups
from review_orchestra.config import Settings, console
from review_orchestra.errors import PromptCheckError
from review_orchestra.prompt_check import REVIEWER_AGENT, check_agent_prompt, check_bundle

_STATUS_STYLES = {
    "✓": "green",
    "✗": "red",
    "⚠": "yellow",
    "ℹ": "blue",
}


def collect_checks(settings: Settings) -> tuple[list[tuple[str, str, str]], bool]:
    """Run every check without printing.

    Returns:
        Tuple of (rows of (status, check, details), all_passed)
    """
    all_passed = True
    results: list[tuple[str, str, str]] = []

    # Check 1: claude CLI
    claude_path = shutil.which(settings.claude_executable)
    if claude_path:
        results.append(("✓", "Claude Code CLI found", claude_path))
    else:
        results.append(("⚠", "Claude Code CLI not found on PATH", settings.claude_executable))
        results.append(("ℹ", "Run 'orchestra install' to install it", ""))

    # Check 2: agent home
    if settings.claude_dir.is_dir():
        results.append(("✓", "Agent home found", str(settings.claude_dir)))
    else:
        results.append(("✗", "Agent home not found", str(settings.claude_dir)))
        results.append(("ℹ", "Run 'orchestra install' to create it", ""))
        all_passed = False

    # Check 3: installed reviewer prompt
    installed = settings.get_agent_path(REVIEWER_AGENT)
    if installed.is_file():
        results.append(("✓", "Reviewer agent installed", str(installed)))
        try:
            report = check_agent_prompt(installed)
        except PromptCheckError as e:
            results.append(("✗", f"Reviewer agent unreadable: {e}", ""))
            all_passed = False
        else:
            if report.ok:
                results.append(("✓", "Reviewer agent passes checks", ""))
            else:
                for issue in report.errors:
                    results.append(("✗", f"Reviewer agent: {issue.message}", ""))
                all_passed = False

        source = settings.source_dir / "agents" / f"{REVIEWER_AGENT}.md"
        if source.is_file() and source.read_bytes() != installed.read_bytes():
            results.append(
                ("⚠", "Installed reviewer differs from source", "Re-run 'orchestra install'")
            )
    else:
        results.append(("✗", "Reviewer agent not installed", str(installed)))
        all_passed = False

    # Check 4: source tree
    try:
        reports = check_bundle(settings.source_dir)
    except PromptCheckError as e:
        results.append(("✗", f"Source prompts unreadable: {e}", ""))
        all_passed = False
    else:
        failing = [report for report in reports if not report.ok]
        if failing:
            for report in failing:
                results.append(("✗", "Source prompt fails checks", str(report.path)))
            all_passed = False
        else:
            results.append(
                ("✓", f"{len(reports)} source prompt(s) pass checks", str(settings.source_dir))
            )

    # Check 5: backups
    backups = list_backups(settings)
    if backups:
        results.append(("ℹ", f"{len(backups)} backup(s) available", backups[0].name))
    else:
        results.append(("ℹ", "No backups yet", str(settings.backup_dir)))

    return results, all_passed


def run_doctor(settings: Settings | None = None) -> int:
    """Run setup validation and print the results.

    Returns:
        Exit code: 0 if all checks passed, 1 if any failures
    """
    settings = settings or Settings.from_environment()

    console.print()
    console.print(Panel.fit("[bold]Review Orchestra Setup Validation[/bold]", border_style="cyan"))
    console.print()

    results, all_passed = collect_checks(settings)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Status", style="bold", width=3)
    table.add_column("Check")
    table.add_column("Details", style="dim")

    for status, check, details in results:
        status_style = _STATUS_STYLES.get(status, "white")
        table.add_row(
            f"[{status_style}]{status}[/{status_style}]", escape(check), escape(details)
        )

    console.print(table)
    console.print()

    if all_passed:
        console.print("[bold green]Everything looks good![/bold green]")
    else:
        console.print(
            "[bold yellow]Some checks failed. Please review the issues above.[/bold yellow]"
        )

    console.print()
    return 0 if all_passed else 1
