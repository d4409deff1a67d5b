"""
Issue types shared by every checker.

An Issue is a single finding: a severity, a stable code identifying the
rule, the path of the document (or catalog) that produced it, and a
human-readable message. Checkers return lists of Issues; only the
reporter concatenates and orders them.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import pathlib as _pathlib
import typing as _typing


class Severity(str, _enum.Enum):
    """How serious a finding is. Only errors affect the exit status."""

    ERROR = "error"
    WARNING = "warning"

    @property
    def rank(self) -> int:
        """Sort rank: errors before warnings."""
        return 0 if self is Severity.ERROR else 1


class IssueCode(str, _enum.Enum):
    """Stable identifiers for every rule."""

    # Loader
    UNREADABLE_DOCUMENT = "unreadable_document"
    MISSING_FRONTMATTER = "missing_frontmatter"
    INVALID_FRONTMATTER = "invalid_frontmatter"
    PARSE_ERROR = "parse_error"
    FRONTMATTER_NOT_MAP = "frontmatter_not_map"
    METADATA_NOT_MAP = "metadata_not_map"

    # Schema
    UNEXPECTED_FRONTMATTER_KEYS = "unexpected_frontmatter_keys"
    MISSING_NAME = "missing_name"
    INVALID_NAME_FORMAT = "invalid_name_format"
    NAME_FOLDER_MISMATCH = "name_folder_mismatch"
    RESERVED_NAME = "reserved_name"
    NAME_TOO_LONG = "name_too_long"
    MISSING_DESCRIPTION = "missing_description"
    EMPTY_DESCRIPTION = "empty_description"
    DESCRIPTION_TOO_LONG = "description_too_long"
    DESCRIPTION_ANGLE_BRACKETS = "description_angle_brackets"
    DESCRIPTION_MISSING_WHEN = "description_missing_when"
    MISSING_VERSION = "missing_version"
    INVALID_VERSION_FORMAT = "invalid_version_format"
    MISSING_EXAMPLES_SECTION = "missing_examples_section"
    MISSING_TROUBLESHOOTING_SECTION = "missing_troubleshooting_section"
    MISSING_WORKFLOW_SECTION = "missing_workflow_section"
    README_NOT_ALLOWED = "readme_not_allowed"
    BODY_TOO_LONG = "body_too_long"

    # Links
    BROKEN_LOCAL_LINK = "broken_local_link"

    # Catalog
    MARKETPLACE_MISSING = "marketplace_missing"
    MARKETPLACE_JSON_ERROR = "marketplace_json_error"
    INVALID_MARKETPLACE_ENTRY = "invalid_marketplace_entry"
    DUPLICATE_MARKETPLACE_ENTRY = "duplicate_marketplace_entry"
    MISSING_MARKETPLACE_ENTRY = "missing_marketplace_entry"
    MISSING_MARKETPLACE_VERSION = "missing_marketplace_version"
    VERSION_MISMATCH_MARKETPLACE = "version_mismatch_marketplace"
    ORPHAN_MARKETPLACE_ENTRY = "orphan_marketplace_entry"

    # Harness
    TRIGGER_MISSING_EXAMPLES = "trigger_missing_examples"
    TRIGGER_ZERO_OVERLAP = "trigger_zero_overlap"
    TRIGGER_NOT_DISCRIMINATING = "trigger_not_discriminating"
    FUNCTIONAL_STRUCTURE_MISSING = "functional_structure_missing"
    PERFORMANCE_LIMITS_EXCEEDED = "performance_limits_exceeded"


@_dataclasses.dataclass(frozen=True)
class Issue:
    """A single finding produced by a checker."""

    severity: Severity
    code: IssueCode
    path: _pathlib.Path
    message: str

    @classmethod
    def error(cls, code: IssueCode, path: _pathlib.Path, message: str) -> Issue:
        """Create an error-severity issue."""
        return cls(severity=Severity.ERROR, code=code, path=path, message=message)

    @classmethod
    def warning(cls, code: IssueCode, path: _pathlib.Path, message: str) -> Issue:
        """Create a warning-severity issue."""
        return cls(severity=Severity.WARNING, code=code, path=path, message=message)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self, root: _pathlib.Path | None = None) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        path = self.path
        if root is not None and path.is_relative_to(root):
            path = path.relative_to(root)
        return {
            "severity": self.severity.value,
            "code": self.code.value,
            "path": str(path),
            "message": self.message,
        }


@_dataclasses.dataclass
class RunReport:
    """
    Aggregate of one audit invocation.

    Produced once per run by the orchestrator and consumed by the
    reporter to print findings and compute the exit status.
    """

    root: _pathlib.Path
    """Repository root the run was computed from."""

    issues: list[Issue] = _dataclasses.field(default_factory=list)
    """Every finding, already sorted for output."""

    documents: int = 0
    """Skill documents processed (active and draft)."""

    active: int = 0
    """Documents outside the drafts subtree."""

    @property
    def drafts(self) -> int:
        return self.documents - self.active

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if not issue.is_error)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "root": str(self.root),
            "documents": self.documents,
            "active": self.active,
            "drafts": self.drafts,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "issues": [issue.to_dict(self.root) for issue in self.issues],
        }
