"""Plain-text rendering of report sections.

Functions:
    render_section(report, section) -> str
    render_text(report)             -> str   (all sections)

Section names: executive-summary, wcag-compliance, detailed-issues,
triage-plan, cultural-accessibility, prd-requirements.
"""

from datetime import datetime

from a11y_audit.models import Report

BULLET = "•"


def _bullets(items) -> str:
    return "\n".join(f"{BULLET} {item}" for item in items)


def _date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).date().isoformat()
    except ValueError:
        return timestamp


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _executive_summary(report: Report) -> str:
    s = report.executive_summary
    return "\n".join([
        "Executive Summary - Accessibility Audit",
        f"URL: {report.url}",
        f"Generated: {_date(report.timestamp)}",
        "",
        "Key Metrics:",
        f"{BULLET} Overall Accessibility Score: {s.overall_score}/100",
        f"{BULLET} Critical Issues: {s.critical_issues}",
        f"{BULLET} Warning Issues: {s.warning_issues}",
        f"{BULLET} Total Issues: {s.total_issues}",
        "",
        "Key Findings:",
        _bullets(s.key_findings),
        "",
        "Business Impact:",
        _bullets(s.business_impact),
        "",
        "Immediate Actions Required:",
        _bullets(s.recommendations[:3]),
    ])


def _wcag_compliance(report: Report) -> str:
    lines = ["WCAG Compliance Assessment"]
    for level in ("A", "AA", "AAA"):
        score = report.wcag_compliance.for_level(level)
        lines += [
            "",
            f"WCAG Level {level}",
            f"Score: {score.score}/100",
            f"Issues: {score.total} ({score.critical} critical)",
        ]
    return "\n".join(lines)


def _detailed_issues(report: Report) -> str:
    blocks = ["Detailed Issues"]
    for issue in report.issues:
        blocks.append("\n".join([
            f"{issue.title} ({issue.wcag_level})",
            f"Priority: {issue.priority}",
            f"Description: {issue.description}",
            f"Impact: {issue.impact}",
            f"Affected Elements: {', '.join(issue.elements[:3])}",
            f"Effort: {issue.effort} | Timeline: {issue.timeline}",
            f"Recommendation: {issue.recommendation}",
        ]))
    return "\n\n".join(blocks)


def _triage_plan(report: Report) -> str:
    plan = report.triage_plan

    def tier(issues) -> str:
        return _bullets(f"{i.title} - {i.timeline}" for i in issues)

    return "\n".join([
        "Triage Plan",
        "",
        "Immediate Actions (Critical Priority):",
        tier(plan.immediate),
        "",
        "Short-term Actions (1-2 weeks):",
        tier(plan.short_term),
        "",
        "Long-term Actions (1+ months):",
        tier(plan.long_term),
        "",
        f"Estimated Total Effort: {plan.estimated_effort} story points",
    ])


def _cultural_accessibility(report: Report) -> str:
    c = report.cultural_considerations
    return "\n".join([
        "Cultural & Situational Accessibility",
        "",
        "Language & Localization:",
        _bullets(c.language),
        "",
        "Cultural Considerations:",
        _bullets(c.cultural),
        "",
        "Situational Accessibility:",
        _bullets(c.situational),
    ])


def _prd_requirements(report: Report) -> str:
    lines = ["Product Requirements for PRD"]
    for bucket in ("functional", "technical", "testing", "compliance"):
        lines += ["", f"{bucket.capitalize()} Requirements:"]
        for req in getattr(report.prd_requirements, bucket):
            lines += [
                "",
                req.requirement,
                f"Why this matters: {req.benefit}",
                f"User Impact: {req.user_impact}",
                f"Implementation: {req.implementation}",
                f"Priority: {req.priority} | Affected Elements: {req.affected_elements}",
            ]
    return "\n".join(lines)


SECTIONS = {
    "executive-summary":      _executive_summary,
    "wcag-compliance":        _wcag_compliance,
    "detailed-issues":        _detailed_issues,
    "triage-plan":            _triage_plan,
    "cultural-accessibility": _cultural_accessibility,
    "prd-requirements":       _prd_requirements,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_section(report: Report, section: str) -> str:
    """Render one section of *report* as plain text.

    Raises:
        KeyError: if *section* is not a known section name.
    """
    try:
        renderer = SECTIONS[section]
    except KeyError:
        raise KeyError(
            f"Unknown section '{section}'. Available: {', '.join(SECTIONS)}"
        ) from None
    return renderer(report)


def render_text(report: Report) -> str:
    return "\n\n\n".join(renderer(report) for renderer in SECTIONS.values())
