"""Data models for accessibility audit reports.

Contains frozen dataclasses used to structure and serialize the JSON output:
    - AffectedNode, RawFinding, RawScanResult   (scanner input)
    - Issue                                     (normalized finding)
    - ComplianceScore, WcagCompliance
    - TriagePlan
    - Requirement, RequirementBuckets
    - ExecutiveSummary, CulturalConsiderations
    - Report

Raw inputs are built with ``from_dict`` from the scanner's camelCase JSON;
every model exposes ``to_dict`` for serialization.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

VIOLATION  = "violation"
INCOMPLETE = "incomplete"

REQUIREMENT_BUCKETS = ("functional", "technical", "testing", "compliance")
REQUIREMENT_PRIORITIES = ("Critical", "High", "Medium", "Low")


# ---------------------------------------------------------------------------
# Scanner input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AffectedNode:
    target: tuple[str, ...] = ()
    html: str = ""
    impact: str | None = None
    message: str = ""

    @property
    def selector(self) -> str:
        return " ".join(self.target)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "AffectedNode":
        target = raw.get("target") or ()
        if isinstance(target, str):
            target = (target,)
        message = raw.get("message")
        if message is None:
            message = _first_check_message(raw.get("any")) or _first_check_message(raw.get("all"))
        return cls(
            target=tuple(_selector_part(t) for t in target),
            html=raw.get("html") or "",
            impact=raw.get("impact"),
            message=message or "",
        )

    def to_dict(self) -> dict:
        return {
            "target":  list(self.target),
            "html":    self.html,
            "impact":  self.impact,
            "message": self.message,
        }


def _selector_part(part: Any) -> str:
    """Flatten one axe target entry; shadow DOM and iframe paths arrive as nested lists."""
    if isinstance(part, (list, tuple)):
        return " ".join(_selector_part(p) for p in part)
    return str(part)


def _first_check_message(checks: Any) -> str:
    """Return the message of the first axe check result, if any."""
    if not checks:
        return ""
    first = checks[0]
    return first.get("message", "") if isinstance(first, dict) else ""


@dataclass(frozen=True)
class RawFinding:
    id: str
    help: str = ""
    description: str = ""
    impact: str | None = None
    tags: tuple[str, ...] = ()
    nodes: tuple[AffectedNode, ...] = ()
    help_url: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "RawFinding":
        return cls(
            id=raw.get("id") or "",
            help=raw.get("help") or "",
            description=raw.get("description") or "",
            impact=raw.get("impact"),
            tags=tuple(raw.get("tags") or ()),
            nodes=tuple(AffectedNode.from_dict(n) for n in raw.get("nodes") or ()),
            help_url=raw.get("helpUrl") or "",
        )


@dataclass(frozen=True)
class RawScanResult:
    violations: tuple[RawFinding, ...] = ()
    incomplete: tuple[RawFinding, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "RawScanResult":
        return cls(
            violations=tuple(RawFinding.from_dict(f) for f in raw.get("violations") or ()),
            incomplete=tuple(RawFinding.from_dict(f) for f in raw.get("incomplete") or ()),
        )


# ---------------------------------------------------------------------------
# Normalized issues and derived views
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Issue:
    id: str
    title: str
    description: str
    wcag_level: str
    severity: str
    priority: str
    impact: str
    elements: tuple[str, ...]
    effort: str
    timeline: str
    kind: str = VIOLATION
    recommendation: str = ""
    help_url: str = ""
    nodes: tuple[AffectedNode, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id":             self.id,
            "title":          self.title,
            "description":    self.description,
            "wcag_level":     self.wcag_level,
            "severity":       self.severity,
            "priority":       self.priority,
            "impact":         self.impact,
            "kind":           self.kind,
            "recommendation": self.recommendation,
            "help_url":       self.help_url,
            "elements":       list(self.elements),
            "effort":         self.effort,
            "timeline":       self.timeline,
            "nodes":          [n.to_dict() for n in self.nodes],
        }


@dataclass(frozen=True)
class ComplianceScore:
    total: int = 0
    critical: int = 0
    score: int = 100

    def to_dict(self) -> dict:
        return {"total": self.total, "critical": self.critical, "score": self.score}


@dataclass(frozen=True)
class WcagCompliance:
    level_a: ComplianceScore = field(default_factory=ComplianceScore)
    level_aa: ComplianceScore = field(default_factory=ComplianceScore)
    level_aaa: ComplianceScore = field(default_factory=ComplianceScore)

    def for_level(self, level: str) -> ComplianceScore:
        return {"A": self.level_a, "AA": self.level_aa, "AAA": self.level_aaa}[level]

    def to_dict(self) -> dict:
        return {
            "level_a":   self.level_a.to_dict(),
            "level_aa":  self.level_aa.to_dict(),
            "level_aaa": self.level_aaa.to_dict(),
        }


@dataclass(frozen=True)
class TriagePlan:
    immediate: tuple[Issue, ...] = ()
    short_term: tuple[Issue, ...] = ()
    long_term: tuple[Issue, ...] = ()
    estimated_effort: int = 0
    timeline: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timeline", MappingProxyType(dict(self.timeline)))

    def to_dict(self) -> dict:
        return {
            "immediate":        [i.to_dict() for i in self.immediate],
            "short_term":       [i.to_dict() for i in self.short_term],
            "long_term":        [i.to_dict() for i in self.long_term],
            "estimated_effort": self.estimated_effort,
            "timeline":         dict(self.timeline),
        }


def _as_count(value: Any) -> int:
    """Return *value* as a non-negative integer count.

    Raises:
        ValueError: for booleans, non-finite or fractional numbers, negative
                    values and anything that is not a number or digit string.
    """
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'affectedElements' must be an integer, got {value!r}")
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        raise ValueError(f"'affectedElements' must be a whole number, got {value!r}")
    if value < 0:
        raise ValueError(f"'affectedElements' must not be negative, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class Requirement:
    requirement: str
    benefit: str
    user_impact: str
    implementation: str
    priority: str
    affected_elements: int

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Requirement":
        """Build a Requirement from generator output.

        Accepts both the camelCase keys requested in the prompt and the
        snake_case keys used by ``to_dict``.

        Raises:
            ValueError: if a field is missing or has an unusable value.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Requirement must be an object, got {type(raw).__name__}")

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in raw:
                    return raw[key]
            raise ValueError(f"Requirement is missing '{keys[0]}'")

        priority = str(pick("priority")).strip().capitalize()
        if priority not in REQUIREMENT_PRIORITIES:
            raise ValueError(f"Unknown requirement priority '{priority}'")

        affected = _as_count(pick("affectedElements", "affected_elements"))

        return cls(
            requirement=str(pick("requirement")),
            benefit=str(pick("benefit")),
            user_impact=str(pick("userImpact", "user_impact")),
            implementation=str(pick("implementation")),
            priority=priority,
            affected_elements=affected,
        )

    def to_dict(self) -> dict:
        return {
            "requirement":       self.requirement,
            "benefit":           self.benefit,
            "user_impact":       self.user_impact,
            "implementation":    self.implementation,
            "priority":          self.priority,
            "affected_elements": self.affected_elements,
        }


@dataclass(frozen=True)
class RequirementBuckets:
    functional: tuple[Requirement, ...] = ()
    technical: tuple[Requirement, ...] = ()
    testing: tuple[Requirement, ...] = ()
    compliance: tuple[Requirement, ...] = ()

    def to_dict(self) -> dict:
        return {
            bucket: [r.to_dict() for r in getattr(self, bucket)]
            for bucket in REQUIREMENT_BUCKETS
        }


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExecutiveSummary:
    overall_score: int
    critical_issues: int
    warning_issues: int
    total_issues: int
    key_findings: tuple[str, ...] = ()
    business_impact: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "overall_score":   self.overall_score,
            "critical_issues": self.critical_issues,
            "warning_issues":  self.warning_issues,
            "total_issues":    self.total_issues,
            "key_findings":    list(self.key_findings),
            "business_impact": list(self.business_impact),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class CulturalConsiderations:
    language: tuple[str, ...] = ()
    cultural: tuple[str, ...] = ()
    situational: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "language":    list(self.language),
            "cultural":    list(self.cultural),
            "situational": list(self.situational),
        }


@dataclass(frozen=True)
class Report:
    url: str
    page_info: Mapping[str, Any]
    timestamp: str
    executive_summary: ExecutiveSummary
    wcag_compliance: WcagCompliance
    issues: tuple[Issue, ...]
    triage_plan: TriagePlan
    cultural_considerations: CulturalConsiderations
    prd_requirements: RequirementBuckets

    def __post_init__(self) -> None:
        object.__setattr__(self, "page_info", MappingProxyType(dict(self.page_info)))

    def to_dict(self) -> dict:
        return {
            "url":                     self.url,
            "page_info":               dict(self.page_info),
            "timestamp":               self.timestamp,
            "executive_summary":       self.executive_summary.to_dict(),
            "wcag_compliance":         self.wcag_compliance.to_dict(),
            "issues":                  [i.to_dict() for i in self.issues],
            "triage_plan":             self.triage_plan.to_dict(),
            "cultural_considerations": self.cultural_considerations.to_dict(),
            "prd_requirements":        self.prd_requirements.to_dict(),
        }
