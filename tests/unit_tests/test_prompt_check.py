"""Tests for prompt file structure checks."""

from pathlib import Path

import pytest

from review_orchestra.config import BUNDLE_DIR
from review_orchestra.errors import PromptCheckError
from review_orchestra.prompt_check import (
    REVIEWER_SECTIONS,
    check_agent_prompt,
    check_bundle,
    check_command_prompt,
    check_path,
    extract_headings,
    split_frontmatter,
)

REVIEWER = BUNDLE_DIR / "agents" / "pr-reviewer.md"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestFrontmatter:
    def test_split_frontmatter(self) -> None:
        data, body = split_frontmatter("---\nname: demo\ndescription: A demo\n---\n\n# Title\n")
        assert data == {"name": "demo", "description": "A demo"}
        assert body == "# Title\n"

    def test_no_frontmatter(self) -> None:
        data, body = split_frontmatter("# Title\n")
        assert data == {}
        assert body == "# Title\n"

    def test_unterminated_frontmatter(self) -> None:
        with pytest.raises(PromptCheckError, match="not closed"):
            split_frontmatter("---\nname: demo\n# Title\n")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(PromptCheckError, match="Invalid YAML"):
            split_frontmatter("---\nname: [unclosed\n---\nbody\n")

    def test_frontmatter_must_be_mapping(self) -> None:
        with pytest.raises(PromptCheckError, match="mapping"):
            split_frontmatter("---\n- a\n- b\n---\nbody\n")


class TestHeadings:
    def test_headings_skip_code_fences(self) -> None:
        body = "# Title\n\n```bash\n# not a heading\n```\n\n## Section ##\n"
        headings = extract_headings(body)
        assert [(h.level, h.title) for h in headings] == [(1, "Title"), (2, "Section")]
        assert headings[1].line == 7

    def test_headings_skip_tilde_fences(self) -> None:
        body = "# Title\n\n~~~markdown\n## Quoted heading\n~~~\n\n## Section\n"
        assert [h.title for h in extract_headings(body)] == ["Title", "Section"]


class TestBundledPrompts:
    def test_reviewer_prompt_passes(self) -> None:
        report = check_agent_prompt(REVIEWER)
        assert report.ok, report.issues
        assert report.warnings == []
        assert report.frontmatter["name"] == "pr-reviewer"
        titles = [heading.title for heading in report.headings if heading.level == 2]
        assert titles == list(REVIEWER_SECTIONS)

    def test_bundle_passes(self) -> None:
        reports = check_bundle(BUNDLE_DIR)
        assert [report.kind for report in reports] == ["agent", "command"]
        assert all(report.ok for report in reports)


class TestAgentPromptIssues:
    def test_missing_frontmatter_keys(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "agents" / "helper.md", "# Helper\n\nDoes things.\n")
        report = check_agent_prompt(path)
        messages = [issue.message for issue in report.errors]
        assert "Frontmatter is missing 'name'" in messages
        assert "Frontmatter is missing 'description'" in messages

    def test_reviewer_missing_sections(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "agents" / "pr-reviewer.md",
            "---\nname: pr-reviewer\ndescription: Reviews PRs\n---\n# PR Reviewer\n\n## Role\n\nText.\n",
        )
        report = check_agent_prompt(path)
        messages = [issue.message for issue in report.errors]
        assert "Missing section: Linear Integration" in messages
        assert "Missing section: Role" not in messages
        assert "Review summary template is missing or has been altered" in messages

    def test_altered_template(self, tmp_path: Path) -> None:
        text = REVIEWER.read_text(encoding="utf-8").replace("[Low/Medium/High]", "[Low/High]")
        path = _write(tmp_path / "agents" / "pr-reviewer.md", text)
        report = check_agent_prompt(path)
        assert not report.ok
        assert [issue.message for issue in report.errors] == [
            "Review summary template is missing or has been altered"
        ]

    def test_unbalanced_fence(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "agents" / "helper.md",
            "---\nname: helper\ndescription: Helps\n---\n# Helper\n\n```bash\nls\n",
        )
        report = check_agent_prompt(path)
        assert "Unbalanced code fence" in [issue.message for issue in report.errors]

    def test_tilde_fences_count_towards_balance(self, tmp_path: Path) -> None:
        closed = _write(
            tmp_path / "agents" / "closed.md",
            "---\nname: closed\ndescription: Helps\n---\n# Closed\n\n~~~\nls\n~~~\n",
        )
        unclosed = _write(
            tmp_path / "agents" / "unclosed.md",
            "---\nname: unclosed\ndescription: Helps\n---\n# Unclosed\n\n~~~\nls\n",
        )
        assert check_agent_prompt(closed).ok
        assert "Unbalanced code fence" in [
            issue.message for issue in check_agent_prompt(unclosed).errors
        ]

    def test_name_mismatch_is_warning(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "agents" / "helper.md",
            "---\nname: other\ndescription: Helps\n---\n# Helper\n\nBody.\n",
        )
        report = check_agent_prompt(path)
        assert report.ok
        assert len(report.warnings) == 1
        assert "does not match" in report.warnings[0].message

    def test_explicit_sections(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "agents" / "helper.md",
            "---\nname: helper\ndescription: Helps\n---\n# Helper\n\n## Usage\n",
        )
        assert check_agent_prompt(path, required_sections=("Usage",)).ok
        assert not check_agent_prompt(path, required_sections=("Usage", "Limits")).ok


class TestCommandPrompt:
    def test_command_requires_description(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "commands" / "go.md", "Do $ARGUMENTS\n")
        report = check_command_prompt(path)
        assert not report.ok

    def test_unused_argument_hint_warns(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "commands" / "go.md",
            "---\ndescription: Go\nargument-hint: \"<x>\"\n---\nDo it\n",
        )
        report = check_command_prompt(path)
        assert report.ok
        assert report.warnings


class TestCheckPath:
    def test_dispatches_on_parent_directory(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "commands" / "go.md", "---\ndescription: Go\n---\nDo it\n")
        [report] = check_path(path)
        assert report.kind == "command"

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(PromptCheckError, match="No such file"):
            check_path(tmp_path / "nope.md")
