"""Finding normalizer — raw scanner findings to Issue records.

Functions:
    normalize_finding(finding, kind)  -> Issue
    normalize_scan(scan_result)       -> list[Issue]

Every derived field is a pure function of the finding itself. Missing impact,
tags or nodes never raise; the documented defaults apply instead.
"""

from a11y_audit.models import INCOMPLETE, VIOLATION, Issue, RawFinding, RawScanResult

DEFAULT_IMPACT = "moderate"
DEFAULT_WCAG_LEVEL = "AA"

#: Checked in order, the first tag present wins
_WCAG_TAGS = (
    ("wcag2a",    "A"),
    ("wcag2aa",   "AA"),
    ("wcag2aaa",  "AAA"),
    ("wcag21a",   "A"),
    ("wcag21aa",  "AA"),
    ("wcag21aaa", "AAA"),
)

_SEVERITY_BY_IMPACT = {
    "critical": "critical",
    "serious":  "critical",
    "moderate": "warning",
    "minor":    "info",
}

_PRIORITY_BY_IMPACT = {
    "critical": "high",
    "serious":  "high",
    "moderate": "medium",
    "minor":    "low",
}

_BASE_EFFORT = {"critical": 3, "serious": 2, "moderate": 1, "minor": 1}
_BASE_DAYS   = {"critical": 2, "serious": 1, "moderate": 0.5, "minor": 0.25}

_MAX_EFFORT_NODES   = 5
_MAX_TIMELINE_NODES = 10


# ---------------------------------------------------------------------------
# Classification rules
# ---------------------------------------------------------------------------

def wcag_level(tags) -> str:
    tags = set(tags or ())
    for tag, level in _WCAG_TAGS:
        if tag in tags:
            return level
    return DEFAULT_WCAG_LEVEL


def severity(impact: str | None, kind: str = VIOLATION) -> str:
    if kind == INCOMPLETE:
        return "warning"
    return _SEVERITY_BY_IMPACT.get(impact, "warning")


def priority(impact: str | None, kind: str = VIOLATION) -> str:
    if kind == INCOMPLETE:
        return "medium"
    return _PRIORITY_BY_IMPACT.get(impact, "medium")


def estimate_effort(node_count: int, impact: str | None) -> str:
    """Return Low / Medium / High from impact weight times affected nodes (capped at 5)."""
    score = _BASE_EFFORT.get(impact, 1) * min(node_count, _MAX_EFFORT_NODES)
    if score <= 2:
        return "Low"
    if score <= 4:
        return "Medium"
    return "High"


def estimate_timeline(node_count: int, impact: str | None) -> str:
    """Return a remediation window from days-per-node times affected nodes (capped at 10)."""
    days = _BASE_DAYS.get(impact, 0.5) * min(node_count, _MAX_TIMELINE_NODES)
    if days <= 1:
        return "1 day"
    if days <= 3:
        return "2-3 days"
    if days <= 7:
        return "1 week"
    return "1-2 weeks"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_finding(finding: RawFinding, kind: str = VIOLATION) -> Issue:
    """Map one raw finding to an Issue.

    Args:
        finding: The scanner finding.
        kind:    ``"violation"`` for confirmed failures, ``"incomplete"`` for
                 items that need manual review.
    """
    node_count = len(finding.nodes)
    return Issue(
        id=finding.id,
        title=finding.help,
        description=finding.description,
        wcag_level=wcag_level(finding.tags),
        severity=severity(finding.impact, kind),
        priority=priority(finding.impact, kind),
        impact=finding.impact or DEFAULT_IMPACT,
        elements=tuple(node.selector for node in finding.nodes),
        effort=estimate_effort(node_count, finding.impact),
        timeline=estimate_timeline(node_count, finding.impact),
        kind=kind,
        recommendation=finding.help,
        help_url=finding.help_url,
        nodes=finding.nodes,
    )


def normalize_scan(scan_result: RawScanResult) -> list[Issue]:
    """Normalize all violations, then all incomplete findings, in source order."""
    issues = [normalize_finding(f, VIOLATION) for f in scan_result.violations]
    issues.extend(normalize_finding(f, INCOMPLETE) for f in scan_result.incomplete)
    return issues
