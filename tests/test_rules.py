"""
Tests for structural and schema rules.

Tests verify that:
- Every rule fires independently, without short-circuiting
- Active-only rules are skipped for drafts
- Name checks use exact folder comparison and case-insensitive reserved terms
"""

import pathlib as _pathlib
import unittest.mock as _mock

import skillaudit.config as config
import skillaudit.document as document
import skillaudit.issues as issues
import skillaudit.rules as rules

Code = issues.IssueCode


def _load(
    tmp_path: _pathlib.Path,
    text: str,
    *,
    folder: str = "pdf-tools",
    active: bool = True,
) -> document.Document:
    path = tmp_path / folder / "SKILL.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    doc, _ = document.load_document(path, active=active)
    return doc


def _codes(doc: document.Document, **limits: int) -> list[Code]:
    return [issue.code for issue in rules.check_document(doc, config.LimitsConfig(**limits))]


class TestValidDocument:
    """A conforming document produces no findings."""

    def test_no_issues(self, tmp_path: _pathlib.Path, skill_text) -> None:
        doc = _load(tmp_path, skill_text())
        assert _codes(doc) == []


class TestFrontmatterKeys:
    """Tests for the allow-list check."""

    def test_unexpected_keys_single_issue(self, tmp_path: _pathlib.Path, skill_text) -> None:
        """All unexpected keys are reported in one issue."""
        doc = _load(tmp_path, skill_text(extra="author: me\nowner: team"))
        found = rules.check_frontmatter(doc, config.LimitsConfig())
        assert [i.code for i in found] == [Code.UNEXPECTED_FRONTMATTER_KEYS]
        assert "author, owner" in found[0].message


class TestNameRules:
    """Tests for name checks."""

    def test_missing_name_skips_dependent_checks(
        self, tmp_path: _pathlib.Path, skill_text
    ) -> None:
        """Without a name only missing_name fires for the name."""
        codes = _codes(_load(tmp_path, skill_text(name=None)))
        assert Code.MISSING_NAME in codes
        assert Code.INVALID_NAME_FORMAT not in codes
        assert Code.NAME_FOLDER_MISMATCH not in codes

    def test_missing_name_still_checks_description(
        self, tmp_path: _pathlib.Path, skill_text
    ) -> None:
        """Description rules run even when the name is missing."""
        codes = _codes(_load(tmp_path, skill_text(name=None, description="has <tags>")))
        assert Code.MISSING_NAME in codes
        assert Code.DESCRIPTION_ANGLE_BRACKETS in codes

    def test_uppercase_name_in_lowercase_folder(
        self, tmp_path: _pathlib.Path, skill_text
    ) -> None:
        """`My-Skill` in `my-skill/` fails both format and exact folder match."""
        codes = _codes(_load(tmp_path, skill_text(name='"My-Skill"'), folder="my-skill"))
        assert Code.INVALID_NAME_FORMAT in codes
        assert Code.NAME_FOLDER_MISMATCH in codes

    def test_folder_mismatch(self, tmp_path: _pathlib.Path, skill_text) -> None:
        """A well-formed name in another folder is a mismatch only."""
        codes = _codes(_load(tmp_path, skill_text(name="pdf-tools"), folder="pdf-kit"))
        assert Code.NAME_FOLDER_MISMATCH in codes
        assert Code.INVALID_NAME_FORMAT not in codes

    def test_invalid_name_formats(self, tmp_path: _pathlib.Path, skill_text) -> None:
        """Leading, trailing and doubled hyphens are invalid."""
        for name in ["-pdf", "pdf-", "pdf--tools", "pdf_tools"]:
            doc = _load(tmp_path, skill_text(name=name), folder=name)
            assert Code.INVALID_NAME_FORMAT in _codes(doc), name

    def test_reserved_name_case_insensitive(self, tmp_path: _pathlib.Path, skill_text) -> None:
        """Reserved terms are matched case-insensitively."""
        doc = _load(tmp_path, skill_text(name="my-claude-helper"), folder="my-claude-helper")
        assert Code.RESERVED_NAME in _codes(doc)

        doc = _load(tmp_path, skill_text(name='"Anthropic"'), folder="Anthropic")
        assert Code.RESERVED_NAME in _codes(doc)

    def test_name_too_long(self, tmp_path: _pathlib.Path, skill_text) -> None:
        """Names longer than the limit are reported."""
        name = "a" * 65
        doc = _load(tmp_path, skill_text(name=name), folder=name)
        assert _codes(doc) == [Code.NAME_TOO_LONG]


class TestDescriptionRules:
    """Tests for description checks."""

    def test_missing_description(self, tmp_path: _pathlib.Path, skill_text) -> None:
        codes = _codes(_load(tmp_path, skill_text(description=None)))
        assert Code.MISSING_DESCRIPTION in codes
        assert Code.EMPTY_DESCRIPTION not in codes

    def test_empty_description(self, tmp_path: _pathlib.Path, skill_text) -> None:
        codes = _codes(_load(tmp_path, skill_text(description='""')))
        assert Code.EMPTY_DESCRIPTION in codes
        assert Code.DESCRIPTION_MISSING_WHEN in codes

    def test_description_too_long(self, tmp_path: _pathlib.Path, skill_text) -> None:
        description = "Use when needed. " + "x" * 1024
        codes = _codes(_load(tmp_path, skill_text(description=description)))
        assert codes == [Code.DESCRIPTION_TOO_LONG]

    def test_description_at_limit(self, tmp_path: _pathlib.Path, skill_text) -> None:
        description = "Use when needed. " + "x" * (1024 - len("Use when needed. "))
        assert _codes(_load(tmp_path, skill_text(description=description))) == []

    def test_angle_brackets(self, tmp_path: _pathlib.Path, skill_text) -> None:
        codes = _codes(_load(tmp_path, skill_text(description="Use when a > b")))
        assert codes == [Code.DESCRIPTION_ANGLE_BRACKETS]

    def test_missing_when_language(self, tmp_path: _pathlib.Path, skill_text) -> None:
        codes = _codes(_load(tmp_path, skill_text(description="Parses PDF files.")))
        assert codes == [Code.DESCRIPTION_MISSING_WHEN]

    def test_when_must_be_a_word(self, tmp_path: _pathlib.Path, skill_text) -> None:
        """`whenever` does not count as trigger language."""
        codes = _codes(_load(tmp_path, skill_text(description="Whenever PDFs appear.")))
        assert Code.DESCRIPTION_MISSING_WHEN in codes


class TestVersionRules:
    """Tests for metadata.version checks."""

    def test_missing_version(self, tmp_path: _pathlib.Path, skill_text) -> None:
        codes = _codes(_load(tmp_path, skill_text(version=None)))
        assert codes == [Code.MISSING_VERSION]

    def test_invalid_versions(self, tmp_path: _pathlib.Path, skill_text) -> None:
        for version in ["0", "03", "1.2", "v2", "-1"]:
            codes = _codes(_load(tmp_path, skill_text(version=version)))
            assert codes == [Code.INVALID_VERSION_FORMAT], version

    def test_no_format_issue_without_version(self, tmp_path: _pathlib.Path, skill_text) -> None:
        """An absent version never yields invalid_version_format, active or draft."""
        for active in (True, False):
            codes = _codes(_load(tmp_path, skill_text(version=None), active=active))
            assert Code.INVALID_VERSION_FORMAT not in codes

    def test_draft_without_version(self, tmp_path: _pathlib.Path, skill_text) -> None:
        codes = _codes(_load(tmp_path, skill_text(version=None), active=False))
        assert codes == []


class TestStructureRules:
    """Tests for body sections and folder contents."""

    def test_missing_sections(self, tmp_path: _pathlib.Path, skill_text) -> None:
        codes = _codes(_load(tmp_path, skill_text(body="\n# Title\n\nNothing here.\n")))
        assert Code.MISSING_EXAMPLES_SECTION in codes
        assert Code.MISSING_TROUBLESHOOTING_SECTION in codes
        assert Code.MISSING_WORKFLOW_SECTION in codes

    def test_singular_example_heading(self, tmp_path: _pathlib.Path, skill_text) -> None:
        body = "\n## Workflow\n\n### Example\n\n## Troubleshooting\n"
        assert _codes(_load(tmp_path, skill_text(body=body))) == []

    def test_heading_must_start_line(self, tmp_path: _pathlib.Path, skill_text) -> None:
        body = "\nSee ## Workflow\n## Examples\n## Troubleshooting\n"
        assert _codes(_load(tmp_path, skill_text(body=body))) == [Code.MISSING_WORKFLOW_SECTION]

    def test_drafts_skip_active_rules(self, tmp_path: _pathlib.Path, skill_text) -> None:
        doc = _load(
            tmp_path,
            skill_text(description="Parses PDFs.", version=None, body="\nbody\n"),
            active=False,
        )
        assert _codes(doc) == []

    def test_readme_not_allowed(self, tmp_path: _pathlib.Path, skill_text) -> None:
        for index, readme in enumerate(("README.md", "readme.md")):
            folder = f"pdf-tools-{index}"
            doc = _load(tmp_path, skill_text(name=folder), folder=folder)
            (doc.path.parent / readme).write_text("# Readme\n", encoding="utf-8")
            assert _codes(doc) == [Code.README_NOT_ALLOWED]

    def test_readme_probe_error_is_not_fatal(
        self, tmp_path: _pathlib.Path, skill_text
    ) -> None:
        """A sibling that cannot be stat-ed does not abort the rules."""
        doc = _load(tmp_path, skill_text())
        with _mock.patch.object(_pathlib.Path, "exists", side_effect=PermissionError):
            found = rules.check_structure(doc, config.LimitsConfig())
        assert found == []

    def test_body_too_long_is_warning(self, tmp_path: _pathlib.Path, skill_text) -> None:
        doc = _load(tmp_path, skill_text())
        found = rules.check_document(doc, config.LimitsConfig(body_max_lines=5))
        assert [i.code for i in found] == [Code.BODY_TOO_LONG]
        assert found[0].severity is issues.Severity.WARNING


class TestScenarioUnterminatedFrontmatter:
    """An unterminated frontmatter still runs the name/description rules."""

    def test_fallback_values_are_checked(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "pdf-tools" / "SKILL.md"
        path.parent.mkdir()
        path.write_text("---\nname: pdf-tools\ndescription: x\n# Body\n", encoding="utf-8")

        doc, loader_issues = document.load_document(path)
        codes = [i.code for i in loader_issues] + _codes(doc)

        assert codes.count(Code.INVALID_FRONTMATTER) == 1
        assert Code.MISSING_NAME in codes
        assert Code.MISSING_DESCRIPTION in codes
