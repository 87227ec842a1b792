"""Triage planning — bucket issues into remediation tiers.

Tiers:
    immediate   critical severity, high priority
    short_term  critical + medium, then warning + high
    long_term   warning + medium or low

Combinations outside these rules (critical + low, any ``info`` issue) are
not placed in any tier. They still count towards ``estimated_effort``.
"""

from a11y_audit.models import Issue, TriagePlan

#: Story points per effort label
EFFORT_POINTS = {"Low": 1, "Medium": 3, "High": 5}


def _matching(issues: list[Issue], severity: str, *priorities: str) -> list[Issue]:
    return [i for i in issues if i.severity == severity and i.priority in priorities]


def total_effort(issues: list[Issue]) -> int:
    return sum(EFFORT_POINTS[i.effort] for i in issues)


def timeline_histogram(issues: list[Issue]) -> dict[str, int]:
    """Count issues by the unit of their remediation window."""
    return {
        "week1":  sum(1 for i in issues if "day" in i.timeline),
        "week2":  sum(1 for i in issues if "week" in i.timeline),
        # No estimate is expressed in months today; kept for report consumers
        "month1": sum(1 for i in issues if "month" in i.timeline),
    }


def plan_triage(issues: list[Issue]) -> TriagePlan:
    return TriagePlan(
        immediate=tuple(_matching(issues, "critical", "high")),
        short_term=tuple(
            _matching(issues, "critical", "medium") + _matching(issues, "warning", "high")
        ),
        long_term=tuple(_matching(issues, "warning", "medium", "low")),
        estimated_effort=total_effort(issues),
        timeline=timeline_histogram(issues),
    )
