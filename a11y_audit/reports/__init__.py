"""Report pipeline: normalize findings, score, triage, synthesize requirements, assemble."""

from a11y_audit.reports.report import ReportError, build_report

__all__ = ["ReportError", "build_report"]
