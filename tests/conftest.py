"""
Shared pytest fixtures for skillaudit tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports. Corpus fixtures
build a throwaway repository with the standard layout:

    <root>/skills/<category>/<name>/SKILL.md
    <root>/skills/_drafts/<name>/SKILL.md
    <root>/marketplace.json
"""

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import skillaudit.config as config

VALID_DESCRIPTION = (
    "Extract tables and text from PDF files. Use when users ask to parse PDF documents."
)

VALID_BODY = """
# PDF Tools

## Workflow

1. Open the file with the reader in [the guide](references/guide.md#setup).
2. Extract each table.

```markdown
See [not a real link](missing/inside-fence.md).
```

## Examples

### Positive Trigger

User: "Extract the tables from this PDF file"

Expected behavior: the skill activates and returns the tables.

### Non-Trigger

User: "Write a haiku about autumn"

Expected behavior: the skill stays inactive.

## Troubleshooting

- Error: The PDF is encrypted.
- Cause: The file is password protected.
- Solution: Ask the user for the password.

See [the format reference](https://example.com/pdf) or [mail us](mailto:team@example.com).
"""


def render_skill(
    name: str | None = "pdf-tools",
    description: str | None = VALID_DESCRIPTION,
    version: str | None = "3",
    body: str = VALID_BODY,
    extra: str = "",
) -> str:
    """Render SKILL.md text from parts; None omits a field."""
    lines = ["---"]
    if name is not None:
        lines.append(f"name: {name}")
    if description is not None:
        lines.append(f"description: {description}")
    lines.append("license: MIT")
    lines.append("metadata:")
    lines.append("  category: documents")
    if version is not None:
        lines.append(f"  version: {version}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    return "\n".join(lines) + "\n" + body


@_pytest.fixture(autouse=True)
def isolated_env(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[None]:
    """
    Isolate every test from SKILLAUDIT_* variables and any config file.

    The working directory is moved to an empty temporary directory so
    that a stray .skillaudit.yaml never leaks into settings.
    """
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    clean = {k: v for k, v in _os.environ.items() if not k.startswith("SKILLAUDIT_")}
    with _mock.patch.dict(_os.environ, clean, clear=True):
        yield


@_pytest.fixture
def skill_text() -> _typing.Callable[..., str]:
    """Builder for SKILL.md text (see render_skill)."""
    return render_skill


@_pytest.fixture
def repo_root(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """Empty repository root with a skills directory."""
    root = tmp_path / "repo"
    (root / "skills").mkdir(parents=True)
    return root


@_pytest.fixture
def write_skill(repo_root: _pathlib.Path) -> _typing.Callable[..., _pathlib.Path]:
    """
    Write a SKILL.md under the repository's skills directory.

    Usage:
        path = write_skill("documents/pdf-tools", render_skill())
    """

    def _write(relative_dir: str, text: str, *, with_guide: bool = True) -> _pathlib.Path:
        skill_dir = repo_root / "skills" / relative_dir
        skill_dir.mkdir(parents=True, exist_ok=True)
        if with_guide:
            (skill_dir / "references").mkdir(exist_ok=True)
            (skill_dir / "references" / "guide.md").write_text("# Guide\n", encoding="utf-8")
        path = skill_dir / "SKILL.md"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@_pytest.fixture
def write_catalog(repo_root: _pathlib.Path) -> _typing.Callable[[_typing.Any], _pathlib.Path]:
    """Write marketplace.json at the repository root."""

    def _write(data: _typing.Any) -> _pathlib.Path:
        path = repo_root / "marketplace.json"
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(_json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return path

    return _write


@_pytest.fixture
def valid_repo(
    repo_root: _pathlib.Path,
    write_skill: _typing.Callable[..., _pathlib.Path],
    write_catalog: _typing.Callable[[_typing.Any], _pathlib.Path],
) -> _pathlib.Path:
    """Repository with one fully conforming skill and a matching catalog."""
    write_skill("documents/pdf-tools", render_skill())
    write_catalog({"skills": [{"name": "pdf-tools", "version": "3"}]})
    return repo_root


@_pytest.fixture
def make_settings() -> _typing.Callable[..., config.AuditSettings]:
    """Build AuditSettings for a repository root."""

    def _make(root: _pathlib.Path, **kwargs: _typing.Any) -> config.AuditSettings:
        return config.AuditSettings(root=root, **kwargs)

    return _make


@_pytest.fixture(autouse=True)
def restore_root_logging() -> _typing.Iterator[None]:
    """Undo the root logger changes the CLI makes with basicConfig(force=True)."""
    root = _logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
