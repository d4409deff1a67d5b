"""
Skill document loading and SKILL.md frontmatter parsing.

A skill document is a SKILL.md file with a YAML frontmatter block
delimited by ``---`` lines. The frontmatter carries metadata; the body
carries instructions. Loading never raises for content problems: a
malformed document yields Issues plus empty fallback values so that the
remaining checks still run against it.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml

import skillaudit.constants as constants
import skillaudit.issues as issues

_logger = _logging.getLogger(__name__)

_NUMERIC_TAGS = frozenset(["tag:yaml.org,2002:int", "tag:yaml.org,2002:float"])


class _FrontmatterLoader(_yaml.SafeLoader):
    """SafeLoader that keeps numeric scalars as their source text.

    Versions are compared as strings, so ``03`` must not become ``3``.
    """


_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in _yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _as_text(value: _typing.Any) -> str:
    if value is None:
        return ""
    return str(value)


class SkillMetadata(_pydantic.BaseModel):
    """Nested ``metadata`` block of a skill's frontmatter."""

    model_config = _pydantic.ConfigDict(extra="allow", frozen=True)

    category: str | None = None
    tags: _typing.Any = None
    status: str | None = None

    version: str | None = _pydantic.Field(
        default=None,
        description="Build id, kept exactly as written",
    )

    @_pydantic.field_validator("category", "status", mode="before")
    @classmethod
    def _coerce_text(cls, value: _typing.Any) -> str:
        return _as_text(value)

    @_pydantic.field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: _typing.Any) -> str | None:
        # An empty `version:` is the same as no version at all
        if value is None or value == "":
            return None
        return str(value)

    @property
    def build(self) -> int | None:
        """Version as an integer, only when it is a well-formed build id."""
        if self.version is None or not constants.BUILD_PATTERN.fullmatch(self.version):
            return None
        return int(self.version)


class Frontmatter(_pydantic.BaseModel):
    """
    Frontmatter parsed from a SKILL.md file.

    Every field is optional here: absent fields are reported by the
    schema rules instead of failing validation. Keys outside the fixed
    allow-list are kept in ``model_extra`` and exposed through
    ``unexpected_keys``.
    """

    model_config = _pydantic.ConfigDict(extra="allow", frozen=True)

    name: str | None = None
    description: str | None = None
    license: str | None = None

    allowed_tools: _typing.Any = _pydantic.Field(default=None, alias="allowed-tools")
    compatibility: _typing.Any = None

    metadata: SkillMetadata | None = None

    @_pydantic.field_validator("name", "description", "license", mode="before")
    @classmethod
    def _coerce_text(cls, value: _typing.Any) -> str:
        return _as_text(value)

    @property
    def unexpected_keys(self) -> list[str]:
        """Top-level keys that are not on the allow-list, in source order."""
        return [
            key
            for key in (self.model_extra or {})
            if key not in constants.ALLOWED_FRONTMATTER_KEYS
        ]

    @property
    def version(self) -> str | None:
        return self.metadata.version if self.metadata else None


@_dataclasses.dataclass(frozen=True)
class Document:
    """
    One skill document under test.

    Read fresh on every run and never mutated.
    """

    path: _pathlib.Path
    """Path to the SKILL.md file."""

    frontmatter: Frontmatter
    """Parsed frontmatter (empty when parsing failed)."""

    body: str
    """Raw text after the frontmatter block."""

    active: bool = True
    """Whether the document is outside the drafts subtree."""

    @property
    def name(self) -> str | None:
        return self.frontmatter.name

    @property
    def description(self) -> str | None:
        return self.frontmatter.description

    @property
    def version(self) -> str | None:
        return self.frontmatter.version

    @property
    def build(self) -> int | None:
        """Declared version as an integer build id, if well-formed."""
        metadata = self.frontmatter.metadata
        return metadata.build if metadata else None

    @property
    def folder(self) -> str:
        """Name of the directory holding the document."""
        return self.path.parent.name

    @property
    def body_line_count(self) -> int:
        return len(self.body.splitlines())

    @property
    def body_word_count(self) -> int:
        return len(self.body.split())


def split_frontmatter(
    text: str,
    path: _pathlib.Path,
) -> tuple[str | None, str, list[issues.Issue]]:
    """
    Split raw SKILL.md text into frontmatter text and body.

    Args:
        text: Raw markdown content.
        path: Document path, used for reporting.

    Returns:
        Tuple of (frontmatter text or None, body, issues). When the
        delimiters are missing or unterminated the body is the full text.
    """
    lines = text.splitlines(keepends=True)

    if not lines or lines[0].strip() != constants.FRONTMATTER_DELIMITER:
        return None, text, [
            issues.Issue.error(
                issues.IssueCode.MISSING_FRONTMATTER,
                path,
                "Missing YAML frontmatter delimiters.",
            )
        ]

    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == constants.FRONTMATTER_DELIMITER:
            return "".join(lines[1:index]), "".join(lines[index + 1 :]), []

    return None, text, [
        issues.Issue.error(
            issues.IssueCode.INVALID_FRONTMATTER,
            path,
            "Unterminated YAML frontmatter block.",
        )
    ]


def parse_frontmatter(
    frontmatter_text: str,
    path: _pathlib.Path,
    *,
    active: bool = True,
) -> tuple[Frontmatter, list[issues.Issue]]:
    """
    Parse frontmatter YAML into a typed record.

    Args:
        frontmatter_text: Text between the delimiters.
        path: Document path, used for reporting.
        active: Whether the document is active. A non-mapping
            `metadata` is only a warning for drafts.

    Returns:
        Tuple of (frontmatter, issues). Parse failures yield an empty
        Frontmatter and a single issue.
    """
    try:
        data = _yaml.load(frontmatter_text, Loader=_FrontmatterLoader)
    except _yaml.YAMLError as e:
        return Frontmatter(), [
            issues.Issue.error(
                issues.IssueCode.PARSE_ERROR,
                path,
                f"Invalid YAML frontmatter: {e}",
            )
        ]

    if not isinstance(data, dict):
        return Frontmatter(), [
            issues.Issue.error(
                issues.IssueCode.FRONTMATTER_NOT_MAP,
                path,
                "Frontmatter must parse to a YAML mapping.",
            )
        ]

    found: list[issues.Issue] = []
    data = {str(key): value for key, value in data.items()}

    metadata = data.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        severity = issues.Severity.ERROR if active else issues.Severity.WARNING
        found.append(
            issues.Issue(
                severity,
                issues.IssueCode.METADATA_NOT_MAP,
                path,
                "Frontmatter `metadata` must be a YAML mapping.",
            )
        )
        data["metadata"] = None
    elif isinstance(metadata, dict):
        data["metadata"] = {str(key): value for key, value in metadata.items()}

    return Frontmatter.model_validate(data), found


def load_document(
    path: _pathlib.Path,
    *,
    active: bool = True,
) -> tuple[Document, list[issues.Issue]]:
    """
    Load a skill document from disk.

    Args:
        path: Path to the SKILL.md file.
        active: Whether the document is outside the drafts subtree.

    Returns:
        Tuple of (document, loader issues). Never raises for unreadable
        or malformed content.
    """
    found: list[issues.Issue] = []

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning("Cannot read %s: %s", path, e)
        found.append(
            issues.Issue.error(
                issues.IssueCode.UNREADABLE_DOCUMENT,
                path,
                f"Cannot read skill document: {e}",
            )
        )
        text = ""

    frontmatter_text, body, split_issues = split_frontmatter(text, path)
    found.extend(split_issues)

    frontmatter = Frontmatter()
    if frontmatter_text is not None:
        frontmatter, parse_issues = parse_frontmatter(frontmatter_text, path, active=active)
        found.extend(parse_issues)

    _logger.debug("Loaded %s (%d loader issues)", path, len(found))
    return Document(path=path, frontmatter=frontmatter, body=body, active=active), found
