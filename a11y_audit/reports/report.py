"""Audit report assembly.

Usage:
    report = build_report(url, page_info, scan_result)             # rule-based requirements
    report = build_report(url, page_info, scan_result, generator)  # generated requirements

``build_report`` is the single entry point presentation code consumes. The
returned Report is immutable; callers that export it later keep a reference
to it and pass it along explicitly.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

from a11y_audit.generator import TextGenerator
from a11y_audit.models import (
    CulturalConsiderations,
    ExecutiveSummary,
    Issue,
    RawScanResult,
    Report,
    WcagCompliance,
)
from a11y_audit.reports.compliance import assess_compliance
from a11y_audit.reports.findings import normalize_scan
from a11y_audit.reports.requirements import synthesize_requirements
from a11y_audit.reports.triage import plan_triage

logger = logging.getLogger("a11y_audit.report")


class ReportError(Exception):
    """Raised when a report cannot be generated for the given request."""


# ---------------------------------------------------------------------------
# Static report content
# ---------------------------------------------------------------------------

_KEY_FINDINGS = (
    "Multiple critical accessibility barriers identified",
    "Color contrast issues affect readability",
    "Keyboard navigation needs improvement",
    "Screen reader compatibility requires attention",
)

_BUSINESS_IMPACT = (
    "Potential legal compliance risks",
    "Reduced user base accessibility",
    "Negative impact on user experience",
    "SEO implications",
)

_RECOMMENDATIONS = (
    "Prioritize critical issues for immediate resolution",
    "Implement accessibility testing in development workflow",
    "Train team on WCAG guidelines",
    "Consider accessibility audit for existing products",
)

CULTURAL_CONSIDERATIONS = CulturalConsiderations(
    language=(
        "Consider right-to-left language support",
        "Provide multiple language options",
        "Use culturally appropriate imagery",
        "Avoid text in images for translation purposes",
    ),
    cultural=(
        "Color meanings vary across cultures",
        "Consider different reading patterns",
        "Respect cultural symbols and imagery",
        "Provide culturally relevant examples",
    ),
    situational=(
        "Design for various lighting conditions",
        "Consider mobile-first approach for developing regions",
        "Account for limited bandwidth scenarios",
        "Support for older assistive technologies",
    ),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def validate_url(url: str) -> str:
    """Return *url* stripped, or raise ReportError if it is not an http(s) URL."""
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ReportError(f"Invalid URL '{url}': expected an http:// or https:// address")
    return url


def overall_score(compliance: WcagCompliance) -> int:
    """Mean of the Level A and AA scores, halves rounded up."""
    return int((compliance.level_a.score + compliance.level_aa.score) / 2 + 0.5)


def summarize(issues: list[Issue], compliance: WcagCompliance) -> ExecutiveSummary:
    return ExecutiveSummary(
        overall_score=overall_score(compliance),
        critical_issues=sum(1 for i in issues if i.severity == "critical"),
        warning_issues=sum(1 for i in issues if i.severity == "warning"),
        total_issues=len(issues),
        key_findings=_KEY_FINDINGS,
        business_impact=_BUSINESS_IMPACT,
        recommendations=_RECOMMENDATIONS,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_report(
    url: str,
    page_info: dict[str, Any] | None,
    scan_result: RawScanResult | dict,
    generator: TextGenerator | None = None,
    now: datetime | None = None,
) -> Report:
    """Turn raw scan results into a complete audit report.

    Args:
        url:         The audited page.
        page_info:   Page metadata from the scanner (title, description, ...).
        scan_result: A RawScanResult, or the scanner's raw ``{"violations",
                     "incomplete"}`` dict.
        generator:   Optional text generator for PRD requirements.
        now:         Report timestamp; defaults to the current UTC time.

    Raises:
        ReportError: if *url* is not a valid http(s) URL or the scan result
                     is not a mapping.
    """
    url = validate_url(url)
    if isinstance(scan_result, dict):
        scan_result = RawScanResult.from_dict(scan_result)
    elif not isinstance(scan_result, RawScanResult):
        raise ReportError(
            f"Scan result must be a mapping with 'violations' and 'incomplete', "
            f"got {type(scan_result).__name__}"
        )

    issues = normalize_scan(scan_result)
    compliance = assess_compliance(issues)
    logger.info("Normalized %d issues for %s", len(issues), url)

    return Report(
        url=url,
        page_info=dict(page_info or {}),
        timestamp=(now or datetime.now(timezone.utc)).isoformat(),
        executive_summary=summarize(issues, compliance),
        wcag_compliance=compliance,
        issues=tuple(issues),
        triage_plan=plan_triage(issues),
        cultural_considerations=CULTURAL_CONSIDERATIONS,
        prd_requirements=synthesize_requirements(issues, compliance, url, generator),
    )
