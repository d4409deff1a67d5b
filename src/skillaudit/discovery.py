"""
Skill document discovery.

Skill documents live under a fixed root:
1. <root>/skills/<category>/<name>/SKILL.md - Active skills
2. <root>/skills/_drafts/**/SKILL.md - Drafts

Drafts are parsed and run through the generic checks, but are excluded
from the active-only rules, the catalog cross-check and the harness.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import pathlib as _pathlib

import skillaudit.constants as constants
import skillaudit.exceptions as exceptions


@_dataclasses.dataclass(frozen=True)
class DocumentRef:
    """A discovered skill document, not yet loaded."""

    path: _pathlib.Path
    active: bool


def is_active(
    path: _pathlib.Path,
    skills_path: _pathlib.Path,
    drafts_dir: str = constants.DEFAULT_DRAFTS_DIR,
) -> bool:
    """
    Check whether a document is active.

    A document is active when it sits under the skills directory and
    not under its drafts subtree.
    """
    try:
        relative = path.relative_to(skills_path)
    except ValueError:
        return False
    return relative.parts[:1] != (drafts_dir,)


class SkillDiscovery:
    """
    Enumerates skill documents under a repository root.

    Results are sorted by path so that every run sees the same order
    regardless of filesystem iteration order.
    """

    def __init__(
        self,
        root: _pathlib.Path,
        *,
        skills_dir: str = constants.DEFAULT_SKILLS_DIR,
        drafts_dir: str = constants.DEFAULT_DRAFTS_DIR,
        skill_filename: str = constants.DEFAULT_SKILL_FILENAME,
    ) -> None:
        """
        Initialize skill discovery.

        Args:
            root: Repository root.
            skills_dir: Skills directory, relative to root.
            drafts_dir: Drafts subtree, relative to the skills directory.
            skill_filename: File name of a skill document.
        """
        self._root = root
        self._skills_path = root / skills_dir
        self._drafts_dir = drafts_dir
        self._skill_filename = skill_filename

    @property
    def skills_path(self) -> _pathlib.Path:
        return self._skills_path

    def discover(self) -> list[DocumentRef]:
        """
        Discover all skill documents, active and draft.

        Raises:
            CorpusNotFoundError: If the skills directory does not exist.
        """
        if not self._skills_path.is_dir():
            raise exceptions.CorpusNotFoundError(
                f"Skills directory not found: {self._skills_path}"
            )

        return [
            DocumentRef(
                path=path,
                active=is_active(path, self._skills_path, self._drafts_dir),
            )
            for path in sorted(self._skills_path.rglob(self._skill_filename))
            if path.is_file()
        ]

    def discover_active(self) -> list[DocumentRef]:
        """Discover active skill documents only."""
        return [ref for ref in self.discover() if ref.active]
