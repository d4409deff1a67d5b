"""
Shared constants for skillaudit.

This module provides a single source of truth for the fixed schema,
directory convention and limits enforced across the checkers.
"""

import re as _re

# Corpus layout defaults
DEFAULT_SKILLS_DIR = "skills"
"""Directory (relative to the repository root) holding all skill documents."""

DEFAULT_DRAFTS_DIR = "_drafts"
"""Subtree of the skills directory excluded from the active rule set."""

DEFAULT_SKILL_FILENAME = "SKILL.md"
"""File name of a skill document."""

DEFAULT_CATALOG_FILE = "marketplace.json"
"""Central catalog, relative to the repository root."""

DEFAULT_WORKERS = 4
"""Default size of the per-document worker pool."""

# Frontmatter schema
FRONTMATTER_DELIMITER = "---"

ALLOWED_FRONTMATTER_KEYS = frozenset(
    ["name", "description", "license", "allowed-tools", "compatibility", "metadata"]
)
"""Top-level frontmatter keys permitted by the authoring contract."""

README_NAMES = ("README.md", "readme.md")
"""Sibling files that must not exist next to an active skill."""

# Limits
NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 1024

SKILL_BODY_SOFT_LIMIT = 500
"""Body line limit; matches the Agent Skills authoring guidance."""

SKILL_BODY_WORD_LIMIT = 5000

# Patterns
NAME_PATTERN = _re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
RESERVED_NAME_PATTERN = _re.compile(r"(claude|anthropic)", _re.IGNORECASE)
WHEN_PATTERN = _re.compile(r"\b(use when|when users say|when)\b", _re.IGNORECASE)
BUILD_PATTERN = _re.compile(r"^[1-9][0-9]*$")

EXAMPLES_HEADING = _re.compile(r"^##+\s+Examples?\b", _re.IGNORECASE | _re.MULTILINE)
TROUBLESHOOTING_HEADING = _re.compile(
    r"^##+\s+Troubleshooting\b", _re.IGNORECASE | _re.MULTILINE
)
WORKFLOW_HEADING = _re.compile(r"^##+\s+Workflow\b", _re.IGNORECASE | _re.MULTILINE)

# Trigger harness
KEYWORD_PATTERN = _re.compile(r"[a-z][a-z0-9+-]{3,}")

STOPWORDS = frozenset(
    """
    the and for with from this that these those use when users say your about into over under
    not any all one two three four five six seven eight nine ten only most more less should
    where what who why how will would could can must have has had into than then also
    """.split()
)
"""Words ignored when extracting description keywords."""

FUNCTIONAL_MARKERS = ("- Error:", "- Cause:", "- Solution:", "Expected behavior:")
"""Literal markers every active skill body must carry."""
