"""
Audit orchestration.

Per-document work (load, schema rules, link checks) is independent and
runs on a worker pool. The catalog cross-check and the harness need
every document loaded first, so they run after the pool has joined.
Only this module merges findings; checkers return their own lists.
"""

from __future__ import annotations

import concurrent.futures as _futures
import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import skillaudit.catalog as catalog
import skillaudit.config as config
import skillaudit.discovery as discovery
import skillaudit.document as document_module
import skillaudit.harness as harness
import skillaudit.issues as issues
import skillaudit.links as links
import skillaudit.report as report
import skillaudit.rules as rules

_logger = _logging.getLogger(__name__)

_T = _typing.TypeVar("_T")
_R = _typing.TypeVar("_R")


@_dataclasses.dataclass(frozen=True)
class DocumentResult:
    """Outcome of the per-document pass."""

    document: document_module.Document
    issues: list[issues.Issue]


def _map(
    fn: _typing.Callable[[_T], _R],
    items: _typing.Sequence[_T],
    workers: int,
) -> list[_R]:
    """Apply fn to items on a worker pool, keeping input order."""
    if workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with _futures.ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(fn, items))


def _discovery(settings: config.AuditSettings) -> discovery.SkillDiscovery:
    return discovery.SkillDiscovery(
        settings.root,
        skills_dir=settings.skills_dir,
        drafts_dir=settings.drafts_dir,
        skill_filename=settings.skill_filename,
    )


def load_documents(
    refs: _typing.Sequence[discovery.DocumentRef],
    settings: config.AuditSettings,
) -> list[document_module.Document]:
    """Load discovered skill documents, discarding loader findings."""
    loaded = _map(
        lambda ref: document_module.load_document(ref.path, active=ref.active),
        refs,
        settings.workers,
    )
    return [doc for doc, _ in loaded]


def audit_document(
    ref: discovery.DocumentRef,
    settings: config.AuditSettings,
) -> DocumentResult:
    """Load one document and run the schema and link checks on it."""
    doc, found = document_module.load_document(ref.path, active=ref.active)
    found = [
        *found,
        *rules.check_document(doc, settings.limits),
        *links.check_links(doc),
    ]
    _logger.debug("Audited %s: %d issues", ref.path, len(found))
    return DocumentResult(document=doc, issues=found)


def run_audit(settings: config.AuditSettings) -> issues.RunReport:
    """
    Run the schema, link and catalog consistency audit.

    Args:
        settings: Audit settings.

    Returns:
        RunReport with every finding, sorted for output.

    Raises:
        CorpusNotFoundError: If the skills directory does not exist.
    """
    refs = _discovery(settings).discover()
    _logger.debug("Discovered %d skill documents under %s", len(refs), settings.skills_path)

    results = _map(lambda ref: audit_document(ref, settings), refs, settings.workers)

    # Join barrier: the catalog pass needs every document
    documents = [result.document for result in results]
    found: list[issues.Issue] = [issue for result in results for issue in result.issues]
    found.extend(catalog.check_consistency(documents, settings.catalog_path))

    return issues.RunReport(
        root=settings.root,
        issues=report.sort_issues(found),
        documents=len(documents),
        active=sum(1 for doc in documents if doc.active),
    )


def run_harness(
    settings: config.AuditSettings,
    scorer: harness.TriggerScorer = harness.score_keyword_overlap,
) -> harness.HarnessReport:
    """
    Run the trigger, functional and performance suites.

    Raises:
        CorpusNotFoundError: If the skills directory does not exist.
    """
    documents = load_documents(_discovery(settings).discover_active(), settings)
    return harness.run_harness(documents, settings.limits, scorer)
