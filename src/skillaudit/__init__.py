"""
skillaudit - validation engine for skill document catalogs

Keeps a corpus of SKILL.md documents and its marketplace.json catalog
internally consistent: a schema/structure audit and a heuristic
trigger-testing harness that run over every document.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("skillaudit")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "skillaudit Contributors"

from skillaudit.audit import run_audit, run_harness  # noqa: E402
from skillaudit.config import AuditSettings  # noqa: E402
from skillaudit.issues import Issue, IssueCode, RunReport, Severity  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "AuditSettings",
    "Issue",
    "IssueCode",
    "RunReport",
    "Severity",
    "run_audit",
    "run_harness",
]
