"""Tests for a11y_audit/reports/findings.py"""

import pytest

from a11y_audit.models import RawFinding, RawScanResult
from a11y_audit.reports.findings import (
    estimate_effort,
    estimate_timeline,
    normalize_finding,
    normalize_scan,
    wcag_level,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _raw(id_="color-contrast", impact="serious", tags=("wcag2aa",), nodes=1, **extra) -> dict:
    raw = {
        "id": id_,
        "help": "Elements must meet minimum color contrast ratio thresholds",
        "description": "Ensures the contrast between foreground and background colors meets WCAG 2 AA",
        "helpUrl": f"https://dequeuniversity.com/rules/axe/4.8/{id_}",
        "impact": impact,
        "tags": list(tags),
        "nodes": [
            {
                "target": [f"#el-{n}"],
                "html": f"<p id=\"el-{n}\">text</p>",
                "impact": impact,
                "any": [{"message": "Element has insufficient color contrast"}],
                "all": [],
            }
            for n in range(nodes)
        ],
    }
    raw.update(extra)
    return raw


def _finding(**kwargs) -> RawFinding:
    return RawFinding.from_dict(_raw(**kwargs))


# ---------------------------------------------------------------------------
# WCAG level
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("tags, expected", [
    (["wcag2a"], "A"),
    (["wcag2aa"], "AA"),
    (["wcag2aaa"], "AAA"),
    (["wcag21a"], "A"),
    (["wcag21aa"], "AA"),
    (["wcag21aaa"], "AAA"),
    (["cat.color", "best-practice"], "AA"),
    ([], "AA"),
    (None, "AA"),
])
def test_wcag_level_from_tags(tags, expected):
    assert wcag_level(tags) == expected


def test_wcag_level_uses_tag_priority_not_tag_order():
    # wcag2aa is checked before wcag21a, whatever order the scanner lists them
    assert wcag_level(["wcag21a", "wcag2aa"]) == "AA"
    assert wcag_level(["wcag2aaa", "wcag2a"]) == "A"


# ---------------------------------------------------------------------------
# Severity / priority
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("impact, severity, priority", [
    ("critical", "critical", "high"),
    ("serious",  "critical", "high"),
    ("moderate", "warning",  "medium"),
    ("minor",    "info",     "low"),
    ("unknown",  "warning",  "medium"),
    (None,       "warning",  "medium"),
])
def test_violation_severity_and_priority(impact, severity, priority):
    issue = normalize_finding(_finding(impact=impact), "violation")
    assert issue.severity == severity
    assert issue.priority == priority


@pytest.mark.parametrize("impact", ["critical", "serious", "moderate", "minor", None])
def test_incomplete_is_always_warning_medium(impact):
    issue = normalize_finding(_finding(impact=impact), "incomplete")
    assert issue.severity == "warning"
    assert issue.priority == "medium"
    assert issue.kind == "incomplete"


def test_missing_impact_defaults_to_moderate():
    raw = _raw()
    del raw["impact"]
    issue = normalize_finding(RawFinding.from_dict(raw))
    assert issue.impact == "moderate"


# ---------------------------------------------------------------------------
# Effort / timeline
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("nodes, impact, expected", [
    (1, "critical", "Medium"),   # 3
    (2, "critical", "High"),     # 6
    (1, "serious",  "Low"),      # 2
    (2, "serious",  "Medium"),   # 4
    (3, "serious",  "High"),     # 6
    (2, "moderate", "Low"),      # 2
    (4, "minor",    "Medium"),   # 4
    (50, "minor",   "High"),     # capped at 5 nodes -> 5
    (3, None,       "Medium"),   # unknown weight 1 -> 3
    (0, "critical", "Low"),
])
def test_estimate_effort(nodes, impact, expected):
    assert estimate_effort(nodes, impact) == expected


@pytest.mark.parametrize("nodes, impact, expected", [
    (4, "minor",    "1 day"),       # 1.0
    (5, "minor",    "2-3 days"),    # 1.25
    (3, "serious",  "2-3 days"),    # 3
    (4, "serious",  "1 week"),      # 4
    (7, "serious",  "1 week"),      # 7
    (8, "serious",  "1-2 weeks"),   # 8
    (50, "moderate", "1 week"),     # capped at 10 nodes -> 5
])
def test_estimate_timeline(nodes, impact, expected):
    assert estimate_timeline(nodes, impact) == expected


def test_estimate_timeline_unknown_impact_uses_half_day():
    assert estimate_timeline(2, None) == "1 day"
    assert estimate_timeline(3, "bogus") == "2-3 days"


# ---------------------------------------------------------------------------
# normalize_finding
# ---------------------------------------------------------------------------

def test_critical_wcag2a_violation_with_six_elements():
    issue = normalize_finding(_finding(impact="critical", tags=("wcag2a",), nodes=6), "violation")
    assert issue.wcag_level == "A"
    assert issue.severity   == "critical"
    assert issue.priority   == "high"
    assert issue.effort     == "High"
    assert issue.timeline   == "1-2 weeks"


def test_copies_identity_fields_and_preserves_element_order():
    issue = normalize_finding(_finding(id_="image-alt", nodes=3))
    assert issue.id             == "image-alt"
    assert issue.title          == "Elements must meet minimum color contrast ratio thresholds"
    assert issue.recommendation == issue.title
    assert issue.description.startswith("Ensures the contrast")
    assert issue.help_url.endswith("/image-alt")
    assert issue.elements == ("#el-0", "#el-1", "#el-2")


def test_node_details_are_kept():
    issue = normalize_finding(_finding(nodes=1))
    node = issue.nodes[0]
    assert node.target  == ("#el-0",)
    assert node.message == "Element has insufficient color contrast"
    assert node.html.startswith("<p")


def test_multi_part_target_is_joined_with_spaces():
    raw = _raw(nodes=0)
    raw["nodes"] = [{"target": ["iframe#frame", "button.submit"], "any": [], "all": [{"message": "m"}]}]
    issue = normalize_finding(RawFinding.from_dict(raw))
    assert issue.elements == ("iframe#frame button.submit",)
    assert issue.nodes[0].message == "m"


def test_nested_shadow_dom_target_is_flattened():
    raw = _raw(nodes=0)
    raw["nodes"] = [{"target": [["#host", "button.inner"]], "any": [], "all": []}]
    issue = normalize_finding(RawFinding.from_dict(raw))
    assert issue.elements == ("#host button.inner",)
    assert issue.nodes[0].target == ("#host button.inner",)


def test_malformed_finding_does_not_raise():
    issue = normalize_finding(RawFinding.from_dict({"id": "region"}))
    assert issue.wcag_level == "AA"
    assert issue.severity   == "warning"
    assert issue.priority   == "medium"
    assert issue.impact     == "moderate"
    assert issue.elements   == ()
    assert issue.effort     == "Low"
    assert issue.timeline   == "1 day"


# ---------------------------------------------------------------------------
# normalize_scan
# ---------------------------------------------------------------------------

def test_normalize_scan_orders_violations_before_incomplete():
    scan = RawScanResult.from_dict({
        "violations": [_raw(id_="v1"), _raw(id_="v2")],
        "incomplete": [_raw(id_="i1")],
    })
    issues = normalize_scan(scan)
    assert [i.id for i in issues] == ["v1", "v2", "i1"]
    assert [i.kind for i in issues] == ["violation", "violation", "incomplete"]


def test_normalize_scan_missing_keys():
    assert normalize_scan(RawScanResult.from_dict({})) == []
