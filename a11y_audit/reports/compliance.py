"""WCAG compliance scoring.

Each conformance level is scored on its own:
``score = max(0, 100 - total * penalty)``.
"""

from a11y_audit.models import ComplianceScore, Issue, WcagCompliance

#: Points deducted per issue at each conformance level
PENALTY_PER_ISSUE = {"A": 15, "AA": 12, "AAA": 10}


def score_level(issues: list[Issue], level: str) -> ComplianceScore:
    at_level = [i for i in issues if i.wcag_level == level]
    return ComplianceScore(
        total=len(at_level),
        critical=sum(1 for i in at_level if i.severity == "critical"),
        score=max(0, 100 - len(at_level) * PENALTY_PER_ISSUE[level]),
    )


def assess_compliance(issues: list[Issue]) -> WcagCompliance:
    return WcagCompliance(
        level_a=score_level(issues, "A"),
        level_aa=score_level(issues, "AA"),
        level_aaa=score_level(issues, "AAA"),
    )
