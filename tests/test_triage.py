"""Tests for a11y_audit/reports/triage.py"""

import random

from a11y_audit.models import Issue
from a11y_audit.reports.triage import plan_triage, timeline_histogram, total_effort


def _issue(id_="rule", severity="warning", priority="medium", effort="Low", timeline="1 day") -> Issue:
    return Issue(
        id=id_, title=id_, description="", wcag_level="AA",
        severity=severity, priority=priority, impact="moderate",
        elements=(), effort=effort, timeline=timeline,
    )


# ---------------------------------------------------------------------------
# Tiers
# ---------------------------------------------------------------------------

def test_tiers():
    issues = [
        _issue("crit-high", "critical", "high"),
        _issue("crit-med", "critical", "medium"),
        _issue("warn-high", "warning", "high"),
        _issue("warn-med", "warning", "medium"),
        _issue("warn-low", "warning", "low"),
    ]
    plan = plan_triage(issues)
    assert [i.id for i in plan.immediate]  == ["crit-high"]
    assert [i.id for i in plan.short_term] == ["crit-med", "warn-high"]
    assert [i.id for i in plan.long_term]  == ["warn-med", "warn-low"]


def test_short_term_lists_critical_medium_first():
    issues = [
        _issue("warn-high", "warning", "high"),
        _issue("crit-med", "critical", "medium"),
    ]
    assert [i.id for i in plan_triage(issues).short_term] == ["crit-med", "warn-high"]


def test_unplaced_combinations_stay_out_of_every_tier():
    issues = [
        _issue("crit-low", "critical", "low"),
        _issue("info-low", "info", "low"),
        _issue("info-high", "info", "high"),
    ]
    plan = plan_triage(issues)
    assert plan.immediate == ()
    assert plan.short_term == ()
    assert plan.long_term == ()
    # ... but still counted in the total effort
    assert plan.estimated_effort == 3


def test_two_immediate_ten_long_term():
    issues = [_issue(f"c{n}", "critical", "high") for n in range(2)]
    issues += [_issue(f"w{n}", "warning", "medium") for n in range(10)]
    plan = plan_triage(issues)
    assert len(plan.immediate) == 2
    assert len(plan.long_term) == 10
    assert plan.short_term == ()


def test_empty_plan():
    plan = plan_triage([])
    assert plan.immediate == plan.short_term == plan.long_term == ()
    assert plan.estimated_effort == 0
    assert plan.timeline == {"week1": 0, "week2": 0, "month1": 0}


# ---------------------------------------------------------------------------
# Effort
# ---------------------------------------------------------------------------

def test_total_effort_weights():
    issues = [_issue(effort="Low"), _issue(effort="Medium"), _issue(effort="High"), _issue(effort="High")]
    assert total_effort(issues) == 1 + 3 + 5 + 5


def test_total_effort_is_order_independent():
    issues = [_issue(effort=e) for e in ["Low", "Medium", "High"] * 4]
    shuffled = issues[:]
    random.Random(7).shuffle(shuffled)
    assert total_effort(shuffled) == total_effort(issues) == 36
    assert plan_triage(shuffled).estimated_effort == 36


# ---------------------------------------------------------------------------
# Timeline histogram
# ---------------------------------------------------------------------------

def test_timeline_histogram():
    issues = [
        _issue(timeline="1 day"),
        _issue(timeline="2-3 days"),
        _issue(timeline="1 week"),
        _issue(timeline="1-2 weeks"),
        _issue(timeline="1-2 weeks"),
    ]
    assert timeline_histogram(issues) == {"week1": 2, "week2": 3, "month1": 0}
