"""
Main CLI entry points for skillaudit.

Two independent commands share one settings layer:
- audit: schema, link and catalog consistency checks
- harness: trigger, functional and performance suites

Both are available as `skillaudit audit` / `skillaudit harness` and as
the standalone `skills-audit` / `skills-harness` scripts.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic

import skillaudit
import skillaudit.audit as audit
import skillaudit.config as config
import skillaudit.exceptions as exceptions
import skillaudit.report as report

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


_COMMON_OPTIONS = (
    _click.option(
        "--root",
        type=_click.Path(file_okay=False, path_type=_pathlib.Path),
        default=None,
        help="Repository root (default: current directory)",
    ),
    _click.option(
        "--workers",
        type=_click.IntRange(min=1),
        default=None,
        help="Worker threads for per-document checks",
    ),
    _click.option("--verbose", is_flag=True, help="Enable debug logging on stderr"),
    _click.option("--json", "json_output", is_flag=True, help="Output in JSON format"),
)


def _common_options(fn: _typing.Callable[..., _typing.Any]) -> _typing.Callable[..., _typing.Any]:
    """Apply the options shared by the audit and harness commands."""
    for option in reversed(_COMMON_OPTIONS):
        fn = option(fn)
    return fn


def _configure_logging(settings: config.AuditSettings, verbose: bool) -> None:
    level = _logging.DEBUG if verbose else getattr(_logging, settings.logging.level.upper())
    _logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=_sys.stderr,
        force=True,
    )


def _warn_unknown_settings(settings: config.AuditSettings) -> None:
    """Log a warning for every config key the settings schema does not know."""
    for key in sorted(settings.collect_all_extra_fields()):
        _logger.warning("Ignoring unknown config key: %s", key)


def _load_settings(root: _pathlib.Path | None, workers: int | None) -> config.AuditSettings:
    """Load settings from environment and config file, then apply CLI overrides."""
    overrides: dict[str, _typing.Any] = {}
    if root is not None:
        overrides["root"] = root
    if workers is not None:
        overrides["workers"] = workers

    try:
        return config.AuditSettings(**overrides)
    except _pydantic.ValidationError as e:
        _click.echo(f"Error: Invalid configuration:\n{e}", err=True)
        raise SystemExit(1) from None


@_click.command(name="audit", context_settings=CONTEXT_SETTINGS)
@_common_options
def audit_command(
    root: _pathlib.Path | None,
    workers: int | None,
    verbose: bool,
    json_output: bool,
) -> None:
    """
    Audit skill documents against the authoring contract.

    Checks frontmatter schema, required sections, local links and
    catalog version consistency. Exits 1 if any error is found.
    """
    settings = _load_settings(root, workers)
    _configure_logging(settings, verbose)
    _warn_unknown_settings(settings)

    try:
        run_report = audit.run_audit(settings)
    except exceptions.CorpusNotFoundError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    if json_output:
        _click.echo(_json.dumps(run_report.to_dict(), indent=2))
    else:
        report.print_audit_report(run_report, report.make_console())

    raise SystemExit(report.exit_code(run_report.issues))


@_click.command(name="harness", context_settings=CONTEXT_SETTINGS)
@_common_options
def harness_command(
    root: _pathlib.Path | None,
    workers: int | None,
    verbose: bool,
    json_output: bool,
) -> None:
    """
    Run the trigger, functional and performance suites.

    Statically scores each active skill's description against its
    example prompts. Exits 1 if any suite fails for any skill.
    """
    settings = _load_settings(root, workers)
    _configure_logging(settings, verbose)
    _warn_unknown_settings(settings)

    try:
        harness_report = audit.run_harness(settings)
    except exceptions.CorpusNotFoundError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    if json_output:
        data = harness_report.to_dict()
        data["failures"] = [failure.to_dict(settings.root) for failure in harness_report.failures]
        _click.echo(_json.dumps(data, indent=2))
    else:
        report.print_harness_report(harness_report, settings.root, report.make_console())

    raise SystemExit(0 if harness_report.passed else 1)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(skillaudit.__version__, "-v", "--version", prog_name="skillaudit")
def cli() -> None:
    """
    skillaudit - validation for skill document catalogs.

    \b
    Examples:
        skillaudit audit                  # Schema, link and catalog audit
        skillaudit harness                # Trigger heuristic suites
        skillaudit audit --root ../repo   # Audit another checkout
        skillaudit audit --json           # Machine-readable report
    """
    pass


cli.add_command(audit_command)
cli.add_command(harness_command)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="skillaudit")


def audit_main() -> None:
    """Standalone audit entry point."""
    audit_command(prog_name="skills-audit")


def harness_main() -> None:
    """Standalone harness entry point."""
    harness_command(prog_name="skills-harness")


if __name__ == "__main__":
    main()
