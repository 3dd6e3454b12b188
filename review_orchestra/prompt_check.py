"""Structural checks for agent and command prompt files.

Prompt files are markdown with an optional YAML frontmatter block. The
checks here only look at shape: frontmatter keys, section headings,
balanced code fences, and for the reviewer agent the summary template.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from review_orchestra.errors import PromptCheckError
from review_orchestra.summary import is_code_fence, summary_template

REVIEWER_AGENT = "pr-reviewer"

REVIEWER_SECTIONS = (
    "Role",
    "Tone and Communication Style",
    "Asking Questions",
    "Complexity Assessment",
    "Review Workflow",
    "GitHub Integration",
    "Linear Integration",
    "Review Summary Template",
    "Example Interaction",
)

_HEADING_RE = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<title>.+?)\s*#*\s*$")


@dataclass
class Heading:
    level: int
    title: str
    line: int


@dataclass
class Issue:
    severity: str  # "error" or "warning"
    message: str


@dataclass
class PromptReport:
    """Result of checking one prompt file."""

    path: Path
    kind: str
    frontmatter: dict = field(default_factory=dict)
    headings: list[Heading] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(self, message: str) -> None:
        self.issues.append(Issue("error", message))

    def warn(self, message: str) -> None:
        self.issues.append(Issue("warning", message))


def split_frontmatter(text: str) -> tuple[dict, str]:
    """Split a leading YAML frontmatter block from markdown.

    Args:
        text: File contents

    Returns:
        Tuple of (frontmatter mapping, remaining body). The mapping is empty
        when the file has no frontmatter.

    Raises:
        PromptCheckError: If the block is unterminated or not a mapping
    """
    text = text.replace("\r\n", "\n")
    if not text.startswith("---\n"):
        return {}, text

    end = re.search(r"^---\s*$", text[4:], flags=re.MULTILINE)
    if end is None:
        raise PromptCheckError("Frontmatter block is not closed with '---'")

    raw = text[4 : 4 + end.start()]
    body = text[4 + end.end() :].lstrip("\n")
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise PromptCheckError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(data, dict):
        raise PromptCheckError("Frontmatter must be a YAML mapping")
    return data, body


def extract_headings(body: str) -> list[Heading]:
    """Return ATX headings in order, skipping fenced code blocks."""
    headings = []
    in_fence = False
    for number, line in enumerate(body.split("\n"), start=1):
        stripped = line.strip()
        if is_code_fence(stripped):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = _HEADING_RE.match(stripped)
        if match:
            headings.append(
                Heading(len(match.group("hashes")), match.group("title"), number)
            )
    return headings


def _fences_balanced(body: str) -> bool:
    fences = [line for line in body.split("\n") if is_code_fence(line)]
    return len(fences) % 2 == 0


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PromptCheckError(f"Could not read {path}: {e}", file_path=str(path)) from e


def _check_markdown(report: PromptReport, text: str) -> str:
    """Shared frontmatter and fence checks. Returns the body."""
    try:
        report.frontmatter, body = split_frontmatter(text)
    except PromptCheckError as e:
        report.error(str(e))
        body = text
    report.headings = extract_headings(body)
    if not _fences_balanced(body):
        report.error("Unbalanced code fence")
    if not body.strip():
        report.error("Prompt body is empty")
    return body


def check_agent_prompt(
    path: Path, required_sections: tuple[str, ...] | None = None
) -> PromptReport:
    """Check an agent prompt file.

    Args:
        path: Path to the agent markdown file
        required_sections: Section titles that must appear as headings.
            Defaults to the reviewer sections for the pr-reviewer agent and
            none for other agents.

    Returns:
        PromptReport with any issues found
    """
    path = Path(path)
    report = PromptReport(path=path, kind="agent")
    body = _check_markdown(report, _read(path))

    for key in ("name", "description"):
        if not str(report.frontmatter.get(key) or "").strip():
            report.error(f"Frontmatter is missing '{key}'")

    name = report.frontmatter.get("name")
    if name and name != path.stem:
        report.warn(f"Frontmatter name '{name}' does not match file name '{path.stem}'")

    if required_sections is None:
        is_reviewer = path.stem == REVIEWER_AGENT or name == REVIEWER_AGENT
        required_sections = REVIEWER_SECTIONS if is_reviewer else ()

    titles = {heading.title.strip().lower() for heading in report.headings}
    for section in required_sections:
        if section.lower() not in titles:
            report.error(f"Missing section: {section}")

    if "Review Summary Template" in required_sections:
        if summary_template() not in body:
            report.error("Review summary template is missing or has been altered")

    if report.headings and report.headings[0].level != 1:
        report.warn("First heading is not a top-level title")

    return report


def check_command_prompt(path: Path) -> PromptReport:
    """Check a slash-command prompt file."""
    path = Path(path)
    report = PromptReport(path=path, kind="command")
    body = _check_markdown(report, _read(path))

    if not str(report.frontmatter.get("description") or "").strip():
        report.error("Frontmatter is missing 'description'")
    if "$ARGUMENTS" not in body and "argument-hint" in report.frontmatter:
        report.warn("Declares 'argument-hint' but never uses $ARGUMENTS")
    return report


def check_bundle(source_dir: Path) -> list[PromptReport]:
    """Check every agent and command prompt in a source tree.

    Args:
        source_dir: Directory containing agents/ and/or commands/

    Returns:
        One report per markdown file, agents first
    """
    source_dir = Path(source_dir)
    reports = [
        check_agent_prompt(path)
        for path in sorted((source_dir / "agents").glob("*.md"))
    ]
    reports.extend(
        check_command_prompt(path)
        for path in sorted((source_dir / "commands").glob("*.md"))
    )
    return reports


def check_path(path: Path) -> list[PromptReport]:
    """Check a source tree or a single prompt file."""
    path = Path(path)
    if path.is_dir():
        return check_bundle(path)
    if not path.exists():
        raise PromptCheckError(f"No such file or directory: {path}", file_path=str(path))
    if path.parent.name == "commands":
        return [check_command_prompt(path)]
    return [check_agent_prompt(path)]
