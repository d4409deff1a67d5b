"""
Local markdown link checking.

Links inside fenced code blocks are sample text, not references, and
are never checked. Remote URLs and mail links are skipped.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import re as _re

import skillaudit.document as document_module
import skillaudit.issues as issues

FENCE_MARKER = "```"

_LINK_RE = _re.compile(r"\[[^\]]+\]\(([^)]+)\)")
_REMOTE_RE = _re.compile(r"^(?:https?://|mailto:)", _re.IGNORECASE)

_logger = _logging.getLogger(__name__)


def strip_fenced_code(markdown: str) -> str:
    """Remove fenced code blocks, fence lines included."""
    in_fence = False
    kept: list[str] = []

    for line in markdown.splitlines(keepends=True):
        if line.lstrip().startswith(FENCE_MARKER):
            in_fence = not in_fence
            continue
        if not in_fence:
            kept.append(line)

    return "".join(kept)


def extract_link_targets(markdown: str) -> list[str]:
    """Extract `[label](target)` targets outside fenced code, in order."""
    return _LINK_RE.findall(strip_fenced_code(markdown))


def is_local_target(target: str) -> bool:
    """Whether a link target refers to a local file."""
    link_path = target.split("#", 1)[0]
    return bool(link_path) and not _REMOTE_RE.match(link_path)


def path_exists(path: _pathlib.Path) -> bool:
    """
    Check whether a path exists.

    Paths the OS refuses to stat (a component longer than NAME_MAX,
    permission denied, an embedded NUL) count as missing.
    """
    try:
        return path.exists()
    except (OSError, ValueError) as e:
        _logger.debug("Cannot stat %s: %s", path, e)
        return False


def check_links(doc: document_module.Document) -> list[issues.Issue]:
    """
    Report every local link whose target does not exist.

    Targets are resolved relative to the document's own directory.
    """
    found: list[issues.Issue] = []

    for target in extract_link_targets(doc.body):
        if not is_local_target(target):
            continue

        link_path = target.split("#", 1)[0]
        if path_exists(doc.path.parent / link_path):
            continue

        found.append(
            issues.Issue.error(
                issues.IssueCode.BROKEN_LOCAL_LINK,
                doc.path,
                f"Broken local link target `{target}`.",
            )
        )

    return found
