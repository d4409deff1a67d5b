"""
Structural and schema rules for skill documents.

Every rule is evaluated independently; a failing rule never hides the
findings of another. Active-only rules apply to documents outside the
drafts subtree.
"""

from __future__ import annotations

import skillaudit.config.types as config_types
import skillaudit.constants as constants
import skillaudit.document as document_module
import skillaudit.issues as issues
import skillaudit.links as links

Issue = issues.Issue
Code = issues.IssueCode


def check_frontmatter(
    doc: document_module.Document,
    limits: config_types.LimitsConfig,
) -> list[Issue]:
    """Check allow-listed keys, name and description."""
    found: list[Issue] = []
    frontmatter = doc.frontmatter

    unexpected = frontmatter.unexpected_keys
    if unexpected:
        found.append(
            Issue.error(
                Code.UNEXPECTED_FRONTMATTER_KEYS,
                doc.path,
                f"Unexpected frontmatter keys: {', '.join(unexpected)}",
            )
        )

    found.extend(check_name(doc, limits))
    found.extend(check_description(doc, limits))
    return found


def check_name(
    doc: document_module.Document,
    limits: config_types.LimitsConfig,
) -> list[Issue]:
    """Check the `name` field against format, folder and reserved terms."""
    name = doc.name
    if name is None:
        return [
            Issue.error(Code.MISSING_NAME, doc.path, "Frontmatter must include `name`.")
        ]

    found: list[Issue] = []

    if not constants.NAME_PATTERN.fullmatch(name):
        found.append(Issue.error(Code.INVALID_NAME_FORMAT, doc.path, "Name must be kebab-case."))

    # Exact comparison: `My-Skill` in `my-skill/` is a mismatch
    if name != doc.folder:
        found.append(
            Issue.error(
                Code.NAME_FOLDER_MISMATCH,
                doc.path,
                f"Name `{name}` must match folder `{doc.folder}`.",
            )
        )

    if constants.RESERVED_NAME_PATTERN.search(name):
        found.append(
            Issue.error(
                Code.RESERVED_NAME,
                doc.path,
                "Name must not include reserved terms `claude` or `anthropic`.",
            )
        )

    if len(name) > limits.name_max_length:
        found.append(
            Issue.error(
                Code.NAME_TOO_LONG,
                doc.path,
                f"Name exceeds {limits.name_max_length} characters ({len(name)}).",
            )
        )

    return found


def check_description(
    doc: document_module.Document,
    limits: config_types.LimitsConfig,
) -> list[Issue]:
    """Check the `description` field for presence, length and characters."""
    description = doc.description
    if description is None:
        return [
            Issue.error(
                Code.MISSING_DESCRIPTION,
                doc.path,
                "Frontmatter must include `description`.",
            )
        ]

    found: list[Issue] = []

    if not description:
        found.append(Issue.error(Code.EMPTY_DESCRIPTION, doc.path, "Description must be non-empty."))

    if len(description) > limits.description_max_length:
        found.append(
            Issue.error(
                Code.DESCRIPTION_TOO_LONG,
                doc.path,
                f"Description exceeds {limits.description_max_length} characters "
                f"({len(description)}).",
            )
        )

    if "<" in description or ">" in description:
        found.append(
            Issue.error(
                Code.DESCRIPTION_ANGLE_BRACKETS,
                doc.path,
                "Description must not include angle brackets.",
            )
        )

    return found


def check_metadata(doc: document_module.Document) -> list[Issue]:
    """Check the `metadata.version` build id of an active document."""
    if not doc.active:
        return []

    version = doc.version
    if version is None:
        return [
            Issue.error(
                Code.MISSING_VERSION,
                doc.path,
                "Metadata must include `version` build id.",
            )
        ]

    if doc.build is None:
        return [
            Issue.error(
                Code.INVALID_VERSION_FORMAT,
                doc.path,
                f"Version `{version}` must be a positive integer build id (e.g., 1, 2, 3).",
            )
        ]

    return []


def check_structure(
    doc: document_module.Document,
    limits: config_types.LimitsConfig,
) -> list[Issue]:
    """Check trigger language, required sections, README siblings and body size."""
    found: list[Issue] = []

    if doc.active:
        if not constants.WHEN_PATTERN.search(doc.description or ""):
            found.append(
                Issue.error(
                    Code.DESCRIPTION_MISSING_WHEN,
                    doc.path,
                    "Active skills must include explicit trigger language (`Use when ...`).",
                )
            )

        sections = (
            (constants.EXAMPLES_HEADING, Code.MISSING_EXAMPLES_SECTION, "## Examples"),
            (
                constants.TROUBLESHOOTING_HEADING,
                Code.MISSING_TROUBLESHOOTING_SECTION,
                "## Troubleshooting",
            ),
            (constants.WORKFLOW_HEADING, Code.MISSING_WORKFLOW_SECTION, "## Workflow"),
        )
        for pattern, code, heading in sections:
            if not pattern.search(doc.body):
                found.append(
                    Issue.error(
                        code,
                        doc.path,
                        f"Active skills must include a `{heading}` section.",
                    )
                )

        if any(
            links.path_exists(doc.path.parent / readme) for readme in constants.README_NAMES
        ):
            found.append(
                Issue.error(
                    Code.README_NOT_ALLOWED,
                    doc.path,
                    "Skill folders must not include README.md/readme.md.",
                )
            )

    if doc.body_line_count > limits.body_max_lines:
        found.append(
            Issue.warning(
                Code.BODY_TOO_LONG,
                doc.path,
                f"Body exceeds recommended limit ({doc.body_line_count} > "
                f"{limits.body_max_lines} lines).",
            )
        )

    return found


def check_document(
    doc: document_module.Document,
    limits: config_types.LimitsConfig | None = None,
) -> list[Issue]:
    """
    Run every structural and schema rule against a document.

    Args:
        doc: Loaded document (possibly with empty fallback values).
        limits: Size limits. Defaults to the built-in limits.

    Returns:
        All findings, in rule order.
    """
    if limits is None:
        limits = config_types.LimitsConfig()

    return [
        *check_frontmatter(doc, limits),
        *check_metadata(doc),
        *check_structure(doc, limits),
    ]
