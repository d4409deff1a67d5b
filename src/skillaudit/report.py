"""
Reporting and exit-status aggregation.

Findings are ordered by (severity, path, code) so that output never
depends on filesystem iteration order or worker timing. Lines are
rendered as rich Text so severities are colored on a terminal and plain
when piped.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import rich.console as _rich_console
import rich.text as _rich_text

import skillaudit.harness as harness
import skillaudit.issues as issues

SEVERITY_STYLES = {
    issues.Severity.ERROR: "bold red",
    issues.Severity.WARNING: "yellow",
}


def sort_issues(found: _typing.Iterable[issues.Issue]) -> list[issues.Issue]:
    """Sort errors before warnings, then by path, then by code."""
    return sorted(
        found,
        key=lambda issue: (issue.severity.rank, str(issue.path), issue.code.value),
    )


def exit_code(found: _typing.Iterable[issues.Issue]) -> int:
    """1 if any error-severity finding exists, 0 otherwise."""
    return 1 if any(issue.is_error for issue in found) else 0


def relative_path(path: _pathlib.Path, root: _pathlib.Path) -> str:
    """Render a path relative to root when it lives under it."""
    if path.is_relative_to(root):
        return str(path.relative_to(root))
    return str(path)


def format_issue(issue: issues.Issue, root: _pathlib.Path) -> _rich_text.Text:
    """Render one finding as `[SEVERITY] code path: message`."""
    return _rich_text.Text.assemble(
        (f"[{issue.severity.value.upper()}]", SEVERITY_STYLES[issue.severity]),
        f" {issue.code.value} {relative_path(issue.path, root)}: {issue.message}",
    )


def make_console() -> _rich_console.Console:
    """Console for report output: no wrapping, no auto-highlighting."""
    return _rich_console.Console(soft_wrap=True, highlight=False)


def print_audit_report(
    report: issues.RunReport,
    console: _rich_console.Console,
) -> None:
    """Print the audit summary, one line per finding, and the totals."""
    console.print(f"Skill files audited: {report.documents}", markup=False)
    console.print(f"Active skills audited: {report.active}", markup=False)

    if not report.issues:
        console.print(_rich_text.Text("PASS: no issues found.", style="green"))
        return

    for issue in report.issues:
        console.print(format_issue(issue, report.root))

    console.print(
        f"Summary: errors={report.error_count}, warnings={report.warning_count}",
        markup=False,
    )


def print_harness_report(
    report: harness.HarnessReport,
    root: _pathlib.Path,
    console: _rich_console.Console,
) -> None:
    """Print per-suite counters followed by one line per failure."""
    console.print(f"Skills tested: {report.skills}", markup=False)
    for suite, result in report.suites.items():
        console.print(
            f"{suite.value.capitalize()} suite: {result.passed}/{result.cases}",
            markup=False,
        )

    if report.passed:
        console.print(
            _rich_text.Text(
                "PASS: trigger, functional, and performance suites all passed.",
                style="green",
            )
        )
        return

    for failure in report.failures:
        console.print(format_issue(failure, root))

    console.print(f"Summary: failures={len(report.failures)}", markup=False)
