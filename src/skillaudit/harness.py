"""
Trigger heuristic harness.

Estimates, without any model calls, whether an active skill's
description would distinguish a relevant request from an irrelevant
one, and whether the body carries the structure the authoring contract
requires. Three independent suites run per skill:

- trigger: keyword overlap between the description and the example
  user prompts under "Positive Trigger" and "Non-Trigger"
- functional: required headings and troubleshooting markers
- performance: body and description size limits
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import re as _re
import typing as _typing

import skillaudit.config.types as config_types
import skillaudit.constants as constants
import skillaudit.document as document_module
import skillaudit.issues as issues

Issue = issues.Issue
Code = issues.IssueCode

_POSITIVE_BLOCK_RE = _re.compile(
    r"^###\s+Positive Trigger\b(.*?)(?=^###\s+Non-Trigger\b|^##\s+Troubleshooting\b|\Z)",
    _re.MULTILINE | _re.DOTALL | _re.IGNORECASE,
)
_NEGATIVE_BLOCK_RE = _re.compile(
    r"^###\s+Non-Trigger\b(.*?)(?=^##\s+Troubleshooting\b|\Z)",
    _re.MULTILINE | _re.DOTALL | _re.IGNORECASE,
)
_USER_PROMPT_RE = _re.compile(r"User:\s*[\"“](.+?)[\"”]", _re.DOTALL)


class Suite(str, _enum.Enum):
    """Harness check categories."""

    TRIGGER = "trigger"
    FUNCTIONAL = "functional"
    PERFORMANCE = "performance"


class TriggerReason(str, _enum.Enum):
    """Outcome of trigger scoring."""

    PASS = "pass"
    ZERO_OVERLAP = "zero_overlap"
    INSUFFICIENT_DISCRIMINATION = "insufficient_discrimination"


@_dataclasses.dataclass(frozen=True)
class TriggerVerdict:
    """Result of scoring a description against example prompts."""

    reason: TriggerReason
    positive_hits: int = 0
    negative_hits: int = 0

    @property
    def passed(self) -> bool:
        return self.reason is TriggerReason.PASS


TriggerScorer = _typing.Callable[[str, str, str], TriggerVerdict]
"""(description, positive prompt, negative prompt) -> verdict."""


def keyword_set(description: str) -> list[str]:
    """Extract distinct, non-stop-word keywords from a description."""
    keywords: list[str] = []
    for token in constants.KEYWORD_PATTERN.findall(description.lower()):
        if token not in constants.STOPWORDS and token not in keywords:
            keywords.append(token)
    return keywords


def score_keyword_overlap(description: str, positive: str, negative: str) -> TriggerVerdict:
    """
    Score how much better the positive prompt matches the description.

    A keyword hits a prompt when it occurs in it as a case-insensitive
    substring. Zero positive hits takes precedence over a tie.
    """
    keywords = keyword_set(description)
    positive = positive.lower()
    negative = negative.lower()
    positive_hits = sum(1 for token in keywords if token in positive)
    negative_hits = sum(1 for token in keywords if token in negative)

    if positive_hits == 0:
        reason = TriggerReason.ZERO_OVERLAP
    elif positive_hits <= negative_hits:
        reason = TriggerReason.INSUFFICIENT_DISCRIMINATION
    else:
        reason = TriggerReason.PASS

    return TriggerVerdict(reason=reason, positive_hits=positive_hits, negative_hits=negative_hits)


def extract_user_prompt(block: str) -> str | None:
    """Extract the quoted `User: "..."` utterance from an example block."""
    match = _USER_PROMPT_RE.search(block)
    return match.group(1) if match else None


def extract_example_prompts(body: str) -> tuple[str | None, str | None]:
    """
    Extract the positive and non-trigger example prompts from a body.

    Returns:
        Tuple of (positive prompt, negative prompt); either may be None.
    """
    positive_block = _POSITIVE_BLOCK_RE.search(body)
    negative_block = _NEGATIVE_BLOCK_RE.search(body)
    positive = extract_user_prompt(positive_block.group(1)) if positive_block else None
    negative = extract_user_prompt(negative_block.group(1)) if negative_block else None
    return positive, negative


def check_trigger(
    doc: document_module.Document,
    scorer: TriggerScorer = score_keyword_overlap,
) -> Issue | None:
    """Run the trigger suite for one document. Returns the failure, if any."""
    positive, negative = extract_example_prompts(doc.body)
    if not positive or not negative:
        return Issue.error(
            Code.TRIGGER_MISSING_EXAMPLES,
            doc.path,
            "Missing positive/non-trigger example user prompts.",
        )

    verdict = scorer(doc.description or "", positive, negative)
    if verdict.reason is TriggerReason.ZERO_OVERLAP:
        return Issue.error(
            Code.TRIGGER_ZERO_OVERLAP,
            doc.path,
            "Positive trigger prompt has zero overlap with description keywords.",
        )
    if verdict.reason is TriggerReason.INSUFFICIENT_DISCRIMINATION:
        return Issue.error(
            Code.TRIGGER_NOT_DISCRIMINATING,
            doc.path,
            "Positive trigger is not more aligned than non-trigger prompt "
            f"(insufficient discrimination: {verdict.positive_hits} <= {verdict.negative_hits}).",
        )
    return None


def check_functional(doc: document_module.Document) -> Issue | None:
    """Run the functional suite for one document."""
    body = doc.body
    present = (
        constants.WORKFLOW_HEADING.search(body) is not None
        and constants.EXAMPLES_HEADING.search(body) is not None
        and constants.TROUBLESHOOTING_HEADING.search(body) is not None
        and all(marker in body for marker in constants.FUNCTIONAL_MARKERS)
    )
    if present:
        return None

    return Issue.error(
        Code.FUNCTIONAL_STRUCTURE_MISSING,
        doc.path,
        "Missing required structure "
        "(Workflow/Examples/Troubleshooting/Error-Cause-Solution/Expected behavior).",
    )


def check_performance(
    doc: document_module.Document,
    limits: config_types.LimitsConfig,
) -> Issue | None:
    """Run the performance suite for one document."""
    lines = doc.body_line_count
    words = doc.body_word_count
    description_length = len(doc.description or "")

    if (
        lines <= limits.body_max_lines
        and words <= limits.body_max_words
        and description_length <= limits.description_max_length
    ):
        return None

    return Issue.error(
        Code.PERFORMANCE_LIMITS_EXCEEDED,
        doc.path,
        f"Exceeds limits: lines={lines} (<={limits.body_max_lines}), "
        f"words={words} (<={limits.body_max_words}), "
        f"description={description_length} (<={limits.description_max_length}).",
    )


@_dataclasses.dataclass
class SuiteResult:
    """Pass/case counters for one suite."""

    cases: int = 0
    passed: int = 0


@_dataclasses.dataclass
class HarnessReport:
    """Corpus-wide harness results."""

    skills: int = 0
    """Active skills tested."""

    suites: dict[Suite, SuiteResult] = _dataclasses.field(
        default_factory=lambda: {suite: SuiteResult() for suite in Suite}
    )
    """Counters per suite, in suite order."""

    failures: list[Issue] = _dataclasses.field(default_factory=list)
    """One issue per failed suite per skill."""

    @property
    def passed(self) -> bool:
        return not self.failures

    def record(self, suite: Suite, failure: Issue | None) -> None:
        """Count one suite case and keep its failure, if any."""
        result = self.suites[suite]
        result.cases += 1
        if failure is None:
            result.passed += 1
        else:
            self.failures.append(failure)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "skills": self.skills,
            "suites": {
                suite.value: {"cases": result.cases, "passed": result.passed}
                for suite, result in self.suites.items()
            },
        }


def run_harness(
    documents: _typing.Iterable[document_module.Document],
    limits: config_types.LimitsConfig | None = None,
    scorer: TriggerScorer = score_keyword_overlap,
) -> HarnessReport:
    """
    Run all three suites over the active documents.

    Args:
        documents: Loaded documents; drafts are ignored.
        limits: Size limits. Defaults to the built-in limits.
        scorer: Trigger scoring function.

    Returns:
        HarnessReport with per-suite counters and failures in document order.
    """
    if limits is None:
        limits = config_types.LimitsConfig()

    report = HarnessReport()
    for doc in documents:
        if not doc.active:
            continue
        report.skills += 1
        report.record(Suite.TRIGGER, check_trigger(doc, scorer))
        report.record(Suite.FUNCTIONAL, check_functional(doc))
        report.record(Suite.PERFORMANCE, check_performance(doc, limits))

    return report
