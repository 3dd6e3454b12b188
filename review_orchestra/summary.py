"""PR review summary: the fixed-shape markdown block the reviewer agent writes.

The reviewer prompt asks the agent to close every review with::

    ## PR Review Summary
    **Scope**: ...
    **Risk Level**: [Low/Medium/High]
    **Architecture Impact**: [None/Minor/Significant]

    **Key Findings**:
    - ...

    **Recommendation**: [Approve/Approve with conditions/Needs revision]
    **Next Steps**: ...

This module renders that block from structured data and parses it back out
of an agent reply so it can be validated.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from review_orchestra.errors import SummaryParseError

SUMMARY_HEADING = "## PR Review Summary"

# Rendered when a review has nothing to report
NO_FINDINGS = "None"

_FIELD_RE = re.compile(r"^\*\*(?P<label>[^*]+?)\*\*\s*:\s*(?P<value>.*)$")
_BULLET_RE = re.compile(r"^[-*+]\s+(?P<text>.*)$")
_HEADING_RE = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<title>.*?)\s*#*\s*$")


def _normalise(value: str) -> str:
    return " ".join(value.strip().lower().split())


def _spans_lines(value: str) -> bool:
    return "\n" in value or "\r" in value


def is_code_fence(line: str) -> bool:
    """Return True if the line opens or closes a fenced code block."""
    return line.strip().startswith(("```", "~~~"))


class _LabelEnum(Enum):
    """Enum whose values are the labels shown in the summary."""

    @classmethod
    def parse(cls, value: str):
        """Look up a member by label, ignoring case and extra whitespace.

        Raises:
            SummaryParseError: If the label is not one of the allowed values
        """
        if isinstance(value, cls):
            return value
        wanted = _normalise(str(value))
        for member in cls:
            if _normalise(member.value) == wanted:
                return member
        raise SummaryParseError(
            f"Invalid {cls.field_name()}: {value!r} "
            f"(expected one of: {cls.choices_text()})",
            field=cls.field_name(),
            value=value,
        )

    @classmethod
    def labels(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def choices_text(cls) -> str:
        return "/".join(cls.labels())

    @classmethod
    def field_name(cls) -> str:
        return cls.__name__


class RiskLevel(_LabelEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def field_name(cls) -> str:
        return "Risk Level"


class ArchitectureImpact(_LabelEnum):
    NONE = "None"
    MINOR = "Minor"
    SIGNIFICANT = "Significant"

    @classmethod
    def field_name(cls) -> str:
        return "Architecture Impact"


class Recommendation(_LabelEnum):
    APPROVE = "Approve"
    APPROVE_WITH_CONDITIONS = "Approve with conditions"
    NEEDS_REVISION = "Needs revision"

    @classmethod
    def field_name(cls) -> str:
        return "Recommendation"


class Complexity(_LabelEnum):
    """Qualitative label the reviewer assigns to a PR. Never computed here."""

    SIMPLE = "Simple"
    MEDIUM = "Medium"
    COMPLEX = "Complex"
    CRITICAL = "Critical"

    @classmethod
    def field_name(cls) -> str:
        return "Complexity"


@dataclass
class ReviewSummary:
    """Structured contents of a PR review summary.

    Attributes:
        scope: One-line description of what the PR touches
        risk_level: Low, Medium or High
        architecture_impact: None, Minor or Significant
        key_findings: Bullet points, in order
        recommendation: Approve, Approve with conditions or Needs revision
        next_steps: What the author or reviewer should do next
    """

    scope: str
    risk_level: RiskLevel
    architecture_impact: ArchitectureImpact
    recommendation: Recommendation
    next_steps: str
    key_findings: list[str] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        *,
        scope: str,
        risk_level: str | RiskLevel,
        architecture_impact: str | ArchitectureImpact,
        recommendation: str | Recommendation,
        next_steps: str,
        key_findings: list[str] | None = None,
    ) -> "ReviewSummary":
        """Build a summary from plain labels, validating every field.

        Line breaks in ``next_steps`` are folded to single spaces, the same
        way a wrapped Next Steps line is read back. A lone ``None`` finding
        means there are no findings.
        """
        findings = [finding.strip() for finding in key_findings or []]
        if len(findings) == 1 and _normalise(findings[0]) == _normalise(NO_FINDINGS):
            findings = []
        summary = cls(
            scope=scope.strip(),
            risk_level=RiskLevel.parse(risk_level),
            architecture_impact=ArchitectureImpact.parse(architecture_impact),
            recommendation=Recommendation.parse(recommendation),
            next_steps=" ".join(next_steps.split()),
            key_findings=findings,
        )
        validate_summary(summary)
        return summary


def validate_summary(summary: ReviewSummary) -> None:
    """Check that a summary can be rendered.

    Raises:
        SummaryParseError: If a required field is empty, a single-line field
            spans several lines, or the findings would not read back as given
    """
    if not summary.scope.strip():
        raise SummaryParseError("Scope must not be empty", field="Scope")
    if _spans_lines(summary.scope.strip()):
        raise SummaryParseError("Scope spans multiple lines", field="Scope")
    if not summary.next_steps.strip():
        raise SummaryParseError("Next Steps must not be empty", field="Next Steps")
    if _spans_lines(summary.next_steps.strip()):
        raise SummaryParseError("Next Steps spans multiple lines", field="Next Steps")
    if len(summary.key_findings) == 1 and _normalise(
        summary.key_findings[0]
    ) == _normalise(NO_FINDINGS):
        raise SummaryParseError(
            f"Use an empty list instead of a lone {NO_FINDINGS!r} finding",
            field="Key Findings",
        )
    for index, finding in enumerate(summary.key_findings, start=1):
        if not finding.strip():
            raise SummaryParseError(
                f"Key finding #{index} is empty", field="Key Findings"
            )
        if _spans_lines(finding.strip()):
            raise SummaryParseError(
                f"Key finding #{index} spans multiple lines", field="Key Findings"
            )


def summary_template() -> str:
    """Return the blank template as the reviewer prompt shows it."""
    return (
        f"{SUMMARY_HEADING}\n"
        "**Scope**: ...\n"
        f"**Risk Level**: [{RiskLevel.choices_text()}]\n"
        f"**Architecture Impact**: [{ArchitectureImpact.choices_text()}]\n"
        "\n"
        "**Key Findings**:\n"
        "- ...\n"
        "\n"
        f"**Recommendation**: [{Recommendation.choices_text()}]\n"
        "**Next Steps**: ...\n"
    )


def render_summary(summary: ReviewSummary) -> str:
    """Render a summary in the fixed markdown shape.

    Args:
        summary: The summary to render

    Returns:
        Markdown text ending with a newline
    """
    validate_summary(summary)
    findings = summary.key_findings or [NO_FINDINGS]
    lines = [
        SUMMARY_HEADING,
        f"**Scope**: {summary.scope.strip()}",
        f"**Risk Level**: {summary.risk_level.value}",
        f"**Architecture Impact**: {summary.architecture_impact.value}",
        "",
        "**Key Findings**:",
        *(f"- {finding.strip()}" for finding in findings),
        "",
        f"**Recommendation**: {summary.recommendation.value}",
        f"**Next Steps**: {summary.next_steps.strip()}",
    ]
    return "\n".join(lines) + "\n"


def _summary_lines(text: str) -> list[str]:
    """Return the lines belonging to the summary section of a reply."""
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    start = None
    level = 2
    fenced = False
    for index, line in enumerate(lines):
        stripped = line.strip()
        if is_code_fence(stripped):
            fenced = not fenced
            continue
        match = _HEADING_RE.match(stripped)
        if match and _normalise(match.group("title")) == "pr review summary":
            start = index + 1
            level = len(match.group("hashes"))
            break

    if start is None:
        raise SummaryParseError(
            f"No '{SUMMARY_HEADING}' heading found", field="heading"
        )

    body = []
    for line in lines[start:]:
        stripped = line.strip()
        if is_code_fence(stripped):
            # A summary quoted inside a fence ends at the closing fence
            if fenced:
                break
            continue
        match = _HEADING_RE.match(stripped)
        if match and len(match.group("hashes")) <= level:
            break
        body.append(stripped)
    return body


def parse_summary(text: str) -> ReviewSummary:
    """Parse a review summary out of markdown text.

    The text may contain other content around the summary; parsing starts
    at the ``## PR Review Summary`` heading and stops at the next heading of
    the same or a higher level.

    Args:
        text: Markdown containing a summary

    Returns:
        The parsed summary

    Raises:
        SummaryParseError: If the heading or a field is missing or invalid
    """
    fields: dict[str, str] = {}
    findings: list[str] = []
    current: str | None = None

    for line in _summary_lines(text):
        if not line:
            if current != "key findings":
                current = None
            continue

        field_match = _FIELD_RE.match(line)
        if field_match:
            current = _normalise(field_match.group("label"))
            fields[current] = field_match.group("value").strip()
            continue

        bullet = _BULLET_RE.match(line)
        if current == "key findings" and bullet:
            findings.append(bullet.group("text").strip())
        elif current == "next steps":
            # Next steps may wrap onto following lines
            fields[current] = f"{fields[current]} {line}".strip()

    required = {
        "scope": "Scope",
        "risk level": "Risk Level",
        "architecture impact": "Architecture Impact",
        "recommendation": "Recommendation",
        "next steps": "Next Steps",
    }
    for key, label in required.items():
        if key not in fields:
            raise SummaryParseError(f"Missing field: {label}", field=label)

    if "key findings" not in fields:
        raise SummaryParseError("Missing field: Key Findings", field="Key Findings")
    if fields["key findings"]:
        # Findings written inline after the label
        findings.insert(0, fields["key findings"])
    if len(findings) == 1 and _normalise(findings[0]) == _normalise(NO_FINDINGS):
        findings = []

    return ReviewSummary.create(
        scope=fields["scope"],
        risk_level=fields["risk level"],
        architecture_impact=fields["architecture impact"],
        recommendation=fields["recommendation"],
        next_steps=fields["next steps"],
        key_findings=findings,
    )
