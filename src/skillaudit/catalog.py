"""
Catalog loading and cross-document version consistency.

The catalog (marketplace.json) registers every active skill by name with
its own build version. The consistency pass needs every document loaded
first, so it runs after the per-document checks have joined.
"""

from __future__ import annotations

import collections as _collections
import dataclasses as _dataclasses
import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic

import skillaudit.document as document_module
import skillaudit.exceptions as exceptions
import skillaudit.issues as issues

_logger = _logging.getLogger(__name__)

Issue = issues.Issue
Code = issues.IssueCode


class CatalogEntry(_pydantic.BaseModel):
    """A skill registered in the catalog."""

    model_config = _pydantic.ConfigDict(extra="allow", frozen=True)

    name: str = _pydantic.Field(..., min_length=1)

    version: str | None = _pydantic.Field(
        default=None,
        description="Build id; compared to SKILL.md as a string",
    )

    @_pydantic.field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: _typing.Any) -> str | None:
        if value is None or isinstance(value, (dict, list)):
            return None
        return str(value)


@_dataclasses.dataclass
class Catalog:
    """Parsed catalog file."""

    path: _pathlib.Path
    """Path to the catalog file."""

    entries: list[CatalogEntry] = _dataclasses.field(default_factory=list)
    """Well-formed entries, in file order."""

    issues: list[Issue] = _dataclasses.field(default_factory=list)
    """Findings about individual entries (malformed or duplicated)."""

    def index(self) -> dict[str, CatalogEntry]:
        """Index entries by name. The first entry wins on duplicates."""
        indexed: dict[str, CatalogEntry] = {}
        for entry in self.entries:
            indexed.setdefault(entry.name, entry)
        return indexed


def _raw_entries(data: _typing.Any) -> list[_typing.Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        skills = data.get("skills", [])
        if isinstance(skills, list):
            return skills
    raise ValueError("expected an array of skills or an object with a `skills` array")


def load_catalog(path: _pathlib.Path) -> Catalog:
    """
    Load and parse the catalog file.

    Args:
        path: Path to marketplace.json.

    Returns:
        Parsed Catalog, with entry-level findings attached.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed.
    """
    if not path.is_file():
        raise exceptions.CatalogError(f"{path.name} not found.", missing=True)

    try:
        data = _json.loads(path.read_text(encoding="utf-8"))
        raw_entries = _raw_entries(data)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise exceptions.CatalogError(f"Invalid JSON: {e}") from e

    catalog = Catalog(path=path)
    for position, raw in enumerate(raw_entries):
        try:
            catalog.entries.append(CatalogEntry.model_validate(raw))
        except _pydantic.ValidationError:
            catalog.issues.append(
                Issue.warning(
                    Code.INVALID_MARKETPLACE_ENTRY,
                    path,
                    f"Catalog entry #{position} must be an object with a non-empty `name`.",
                )
            )

    counts = _collections.Counter(entry.name for entry in catalog.entries)
    for name, count in counts.items():
        if count > 1:
            catalog.issues.append(
                Issue.error(
                    Code.DUPLICATE_MARKETPLACE_ENTRY,
                    path,
                    f"Skill `{name}` appears {count} times in {path.name}.",
                )
            )

    return catalog


def check_versions(
    documents: _typing.Iterable[document_module.Document],
    catalog: Catalog,
) -> list[Issue]:
    """
    Compare each active document's version against its catalog entry.

    Only active documents with both a name and a declared version are
    checked. Each checked document yields at most one finding.
    """
    found: list[Issue] = []
    index = catalog.index()

    for doc in documents:
        if not doc.active or not doc.name or doc.version is None:
            continue

        entry = index.get(doc.name)
        if entry is None:
            found.append(
                Issue.error(
                    Code.MISSING_MARKETPLACE_ENTRY,
                    doc.path,
                    f"Active skill `{doc.name}` is missing from {catalog.path.name}.",
                )
            )
            continue

        if entry.version is None:
            found.append(
                Issue.error(
                    Code.MISSING_MARKETPLACE_VERSION,
                    doc.path,
                    f"Catalog entry for `{doc.name}` is missing a version build id.",
                )
            )
            continue

        # String comparison: "03" and "3" are different build ids
        if doc.version != entry.version:
            found.append(
                Issue.error(
                    Code.VERSION_MISMATCH_MARKETPLACE,
                    doc.path,
                    f"Version `{doc.version}` in {doc.path.name} does not match "
                    f"{catalog.path.name} version `{entry.version}`.",
                )
            )

    return found


def check_orphans(
    documents: _typing.Iterable[document_module.Document],
    catalog: Catalog,
) -> list[Issue]:
    """Report catalog entries that match no discovered document."""
    known = {doc.name for doc in documents if doc.name}
    return [
        Issue.warning(
            Code.ORPHAN_MARKETPLACE_ENTRY,
            catalog.path,
            f"Catalog entry `{name}` does not match any skill document.",
        )
        for name in catalog.index()
        if name not in known
    ]


def check_consistency(
    documents: _typing.Sequence[document_module.Document],
    catalog_path: _pathlib.Path,
) -> list[Issue]:
    """
    Run the cross-document consistency pass.

    A missing or unparsable catalog yields a single finding and skips
    the per-skill checks.

    Args:
        documents: Every loaded document, active and draft.
        catalog_path: Path to marketplace.json.

    Returns:
        All consistency findings.
    """
    try:
        catalog = load_catalog(catalog_path)
    except exceptions.CatalogError as e:
        _logger.warning("Skipping catalog consistency checks: %s", e)
        code = Code.MARKETPLACE_MISSING if e.missing else Code.MARKETPLACE_JSON_ERROR
        return [Issue.error(code, catalog_path, str(e))]

    return [
        *catalog.issues,
        *check_versions(documents, catalog),
        *check_orphans(documents, catalog),
    ]
