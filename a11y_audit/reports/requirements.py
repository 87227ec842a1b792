"""PRD requirement synthesis.

Functions:
    synthesize_requirements(issues, compliance, url, generator=None) -> RequirementBuckets
    fallback_requirements(issues, compliance)                        -> RequirementBuckets
    categorize(issue)                                                -> frozenset[str]

When a text generator is supplied, it is asked once for the four requirement
buckets as JSON. Any failure (backend error, no JSON in the reply, bad shape)
is logged and the rule-based synthesis is used instead, so a report is always
produced.
"""

import json
import logging

from a11y_audit.generator import GeneratorError, TextGenerator
from a11y_audit.models import (
    REQUIREMENT_BUCKETS,
    Issue,
    Requirement,
    RequirementBuckets,
    WcagCompliance,
)

logger = logging.getLogger("a11y_audit.requirements")

#: Category label -> substrings matched against the issue id
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "keyboard":       ("keyboard", "tabindex", "focus"),
    "color_contrast": ("color-contrast",),
    "images":         ("image-alt", "alt-text"),
    "forms":          ("label", "form"),
    "focus":          ("focus-order", "focus-visible"),
    "headings":       ("heading", "h1", "h2"),
    "aria":           ("aria", "role"),
    "landmarks":      ("landmark", "region"),
}

_FUNCTIONAL_CATEGORIES = ("keyboard", "color_contrast", "images", "forms")
_TECHNICAL_CATEGORIES  = ("focus", "headings", "aria", "landmarks")

_TOP_ISSUES = 10
_SAMPLE_ELEMENTS = 3
_MANUAL_TESTING_THRESHOLD = 5
_GOVERNANCE_THRESHOLD = 10

_SEVERITY_RANK = {"critical": 0, "warning": 1, "info": 2}
_PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------

def categorize(issue: Issue) -> frozenset[str]:
    """Return every category whose keywords appear in the issue id."""
    issue_id = issue.id.lower()
    return frozenset(
        label for label, keywords in CATEGORY_KEYWORDS.items()
        if any(kw in issue_id for kw in keywords)
    )


def group_by_category(issues: list[Issue]) -> dict[str, list[Issue]]:
    groups: dict[str, list[Issue]] = {label: [] for label in CATEGORY_KEYWORDS}
    for issue in issues:
        for label in categorize(issue):
            groups[label].append(issue)
    return groups


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def synthesize_requirements(
    issues: list[Issue],
    compliance: WcagCompliance,
    url: str,
    generator: TextGenerator | None = None,
) -> RequirementBuckets:
    if generator is None:
        return fallback_requirements(issues, compliance)

    prompt = build_prompt(issues, compliance, url)
    try:
        reply = generator.generate(prompt)
    except GeneratorError as exc:
        logger.warning("Requirement generation failed, using rule-based requirements: %s", exc)
        return fallback_requirements(issues, compliance)
    except Exception:
        # Third-party generators may raise anything; the report must still be produced
        logger.warning(
            "Unexpected text generator error, using rule-based requirements", exc_info=True,
        )
        return fallback_requirements(issues, compliance)

    try:
        buckets = parse_requirements(reply)
    except ValueError as exc:
        logger.warning("Unusable requirement reply, using rule-based requirements: %s", exc)
        return fallback_requirements(issues, compliance)

    logger.info(
        "Generated %d requirements for %s",
        sum(len(getattr(buckets, b)) for b in REQUIREMENT_BUCKETS), url,
    )
    return buckets


# ---------------------------------------------------------------------------
# Generative path
# ---------------------------------------------------------------------------

_INSTRUCTIONS = """\
You are an accessibility specialist writing product requirements (PRD) for a \
web team. Based on the automated audit summary below, write concrete, \
user-centred requirements that explain what must change and why it matters.

Respond ONLY with a JSON object of this exact shape:
{
  "functional": [REQUIREMENT, ...],
  "technical": [REQUIREMENT, ...],
  "testing": [REQUIREMENT, ...],
  "compliance": [REQUIREMENT, ...]
}
where each REQUIREMENT is:
{
  "requirement": "what must be delivered",
  "benefit": "why this matters",
  "userImpact": "who is affected and how",
  "implementation": "how to implement it, referencing affected elements",
  "priority": "Critical | High | Medium | Low",
  "affectedElements": 0
}
"""


def build_summary(issues: list[Issue], compliance: WcagCompliance, url: str) -> dict:
    """Condensed audit data sent to the text generator."""
    ranked = sorted(
        issues,
        key=lambda i: (_SEVERITY_RANK.get(i.severity, 3), _PRIORITY_RANK.get(i.priority, 3)),
    )
    return {
        "url":          url,
        "total_issues": len(issues),
        "by_severity": {
            sev: sum(1 for i in issues if i.severity == sev) for sev in _SEVERITY_RANK
        },
        "by_category": {
            label: len(group) for label, group in group_by_category(issues).items()
        },
        "wcag_compliance": compliance.to_dict(),
        "top_issues": [
            {
                "id":             i.id,
                "title":          i.title,
                "severity":       i.severity,
                "priority":       i.priority,
                "wcag_level":     i.wcag_level,
                "impact":         i.impact,
                "element_count":  len(i.elements),
                "elements":       list(i.elements[:_SAMPLE_ELEMENTS]),
            }
            for i in ranked[:_TOP_ISSUES]
        ],
    }


def build_prompt(issues: list[Issue], compliance: WcagCompliance, url: str) -> str:
    summary = build_summary(issues, compliance, url)
    return f"{_INSTRUCTIONS}\nAudit summary:\n{json.dumps(summary, indent=2)}"


def _reject_constant(name: str):
    raise ValueError(f"non-finite number '{name}' in reply")


def extract_json_object(text: str) -> dict | None:
    """Return the first well-formed JSON object embedded in *text*, if any.

    ``NaN`` and ``Infinity`` are not JSON and make an object ill-formed.
    """
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except ValueError:
            start = text.find("{", start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)
    return None


def parse_requirements(reply: str) -> RequirementBuckets:
    """Parse a generator reply into requirement buckets.

    Raises:
        ValueError: if no JSON object is found or it does not have the
                    expected shape.
    """
    obj = extract_json_object(reply)
    if obj is None:
        raise ValueError("no JSON object found in reply")

    buckets = {}
    for bucket in REQUIREMENT_BUCKETS:
        items = obj.get(bucket)
        if not isinstance(items, list):
            raise ValueError(f"'{bucket}' must be a list of requirements")
        buckets[bucket] = tuple(Requirement.from_dict(item) for item in items)
    return RequirementBuckets(**buckets)


# ---------------------------------------------------------------------------
# Rule-based fallback
# ---------------------------------------------------------------------------

_CATEGORY_TEMPLATES = {
    "keyboard": {
        "requirement":    "Make all interactive functionality operable by keyboard ({issues})",
        "benefit":        "Keyboard-only and switch users can reach and activate every control",
        "user_impact":    "Users who cannot use a mouse are currently blocked from parts of the page",
        "implementation": "Use native interactive elements or add tabindex and key handlers to custom "
                          "widgets; never remove focus from reachable controls",
    },
    "color_contrast": {
        "requirement":    "Meet minimum text color contrast ratios ({issues})",
        "benefit":        "Text stays readable for low-vision users and in bright environments",
        "user_impact":    "Users with low vision or color blindness struggle to read affected text",
        "implementation": "Adjust foreground and background colors to reach 4.5:1 for body text and "
                          "3:1 for large text",
    },
    "images": {
        "requirement":    "Provide text alternatives for all meaningful images ({issues})",
        "benefit":        "Screen reader users get the information conveyed by images",
        "user_impact":    "Blind users currently hear file names or nothing for affected images",
        "implementation": "Add descriptive alt text to informative images and empty alt to "
                          "decorative ones",
    },
    "forms": {
        "requirement":    "Give every form control an accessible label ({issues})",
        "benefit":        "Users understand what each field expects before they fill it in",
        "user_impact":    "Assistive technology users cannot identify unlabeled inputs",
        "implementation": "Associate a visible <label> with each control, or use aria-labelledby "
                          "where a visible label already exists",
    },
    "focus": {
        "requirement":    "Keep focus order logical and focus indicators visible ({issues})",
        "benefit":        "Keyboard users always know where they are on the page",
        "user_impact":    "Users lose their place when focus jumps or disappears",
        "implementation": "Follow DOM order for focus, avoid positive tabindex values and keep a "
                          "visible :focus style on every control",
    },
    "headings": {
        "requirement":    "Use a consistent heading structure ({issues})",
        "benefit":        "Pages can be scanned and navigated by section",
        "user_impact":    "Screen reader users rely on headings to skim and jump through content",
        "implementation": "Provide a single h1 and nest h2 to h6 without skipping levels",
    },
    "aria": {
        "requirement":    "Use ARIA roles and attributes correctly ({issues})",
        "benefit":        "Custom widgets are announced with the right name, role and state",
        "user_impact":    "Invalid ARIA gives assistive technology users misleading information",
        "implementation": "Prefer native HTML semantics, and validate that every role has its "
                          "required attributes and allowed children",
    },
    "landmarks": {
        "requirement":    "Structure page content with landmark regions ({issues})",
        "benefit":        "Users can jump directly to main content, navigation and other regions",
        "user_impact":    "Screen reader users must otherwise read the page linearly",
        "implementation": "Wrap content in header, nav, main and footer elements and make sure all "
                          "content sits inside a landmark",
    },
}


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _sample_elements(issues: list[Issue]) -> list[str]:
    samples: list[str] = []
    for issue in issues:
        for element in issue.elements:
            if element not in samples:
                samples.append(element)
            if len(samples) == _SAMPLE_ELEMENTS:
                return samples
    return samples


def _category_priority(issues: list[Issue]) -> str:
    if any(i.severity == "critical" and i.priority == "high" for i in issues):
        return "Critical"
    if any(i.severity == "critical" or i.priority == "high" for i in issues):
        return "High"
    if any(i.severity == "warning" for i in issues):
        return "Medium"
    return "Low"


def _category_requirement(label: str, issues: list[Issue]) -> Requirement:
    template = _CATEGORY_TEMPLATES[label]
    implementation = template["implementation"]
    samples = _sample_elements(issues)
    if samples:
        implementation += ". Start with: " + ", ".join(samples)

    return Requirement(
        requirement=template["requirement"].format(issues=_plural(len(issues), "issue")),
        benefit=template["benefit"],
        user_impact=template["user_impact"],
        implementation=implementation,
        priority=_category_priority(issues),
        affected_elements=sum(len(i.elements) for i in issues),
    )


def _testing_requirements(issues: list[Issue]) -> list[Requirement]:
    total = len(issues)
    requirements = []
    if total > 0:
        requirements.append(Requirement(
            requirement="Run automated accessibility checks in continuous integration",
            benefit=f"Catches regressions of the {_plural(total, 'issue')} found in this audit",
            user_impact="Fixed barriers stay fixed across releases",
            implementation="Add an axe-core scan of key pages to the CI pipeline and fail "
                           "builds on new violations",
            priority="High" if any(i.severity == "critical" for i in issues) else "Medium",
            affected_elements=total,
        ))
    if total > _MANUAL_TESTING_THRESHOLD:
        requirements.append(Requirement(
            requirement="Perform manual testing with keyboard and screen readers",
            benefit="Finds barriers automated tools cannot detect",
            user_impact="Confirms real-world usability for assistive technology users",
            implementation="Test key user journeys each release with NVDA, VoiceOver and "
                           "keyboard-only navigation",
            priority="Medium",
            affected_elements=total,
        ))
    return requirements


def _compliance_requirements(issues: list[Issue], compliance: WcagCompliance) -> list[Requirement]:
    level_a = compliance.level_a.total
    level_aa = compliance.level_aa.total
    if level_a:
        priority = "Critical"
    elif level_aa:
        priority = "High"
    else:
        priority = "Low"

    requirements = [Requirement(
        requirement="Achieve WCAG 2.1 Level AA conformance",
        benefit="Meets international accessibility standards and reduces legal risk",
        user_impact="Ensures broad accessibility coverage for users with disabilities",
        implementation=f"Resolve {_plural(level_a, 'Level A issue')} and "
                       f"{_plural(level_aa, 'Level AA issue')} identified in the audit",
        priority=priority,
        affected_elements=level_a + level_aa,
    )]

    if len(issues) > _GOVERNANCE_THRESHOLD:
        requirements.append(Requirement(
            requirement="Establish accessibility governance and ownership",
            benefit="Keeps accessibility a tracked, owned quality attribute",
            user_impact="Prevents the volume of barriers found in this audit from recurring",
            implementation="Name an accessibility owner, add accessibility acceptance criteria "
                           "to the definition of done and train the team on WCAG",
            priority="High",
            affected_elements=len(issues),
        ))
    return requirements


def fallback_requirements(issues: list[Issue], compliance: WcagCompliance) -> RequirementBuckets:
    """Rule-based requirements derived from category counts. Pure function."""
    groups = group_by_category(issues)
    return RequirementBuckets(
        functional=tuple(
            _category_requirement(label, groups[label])
            for label in _FUNCTIONAL_CATEGORIES if groups[label]
        ),
        technical=tuple(
            _category_requirement(label, groups[label])
            for label in _TECHNICAL_CATEGORIES if groups[label]
        ),
        testing=tuple(_testing_requirements(issues)),
        compliance=tuple(_compliance_requirements(issues, compliance)),
    )
