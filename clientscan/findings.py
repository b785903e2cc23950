"""Finding assembly: severity bands, fixed texts, and constructors."""

from __future__ import annotations

from models import Finding, FindingType, Severity, clamp

PASSWORD_EVIDENCE_CHARS = 400
EVIDENCE_CHARS = 420

RECOMMENDATIONS: dict[FindingType, str] = {
    "PasswordValueInDom": (
        "Do not render secrets or passwords into client-side HTML. Populate "
        "credentials server-side only when needed, and never include password "
        "values in responses. Enforce server-side authorization and consider "
        "rotating exposed credentials."
    ),
    "HiddenOrDisabledControl": (
        "Do not rely on client-side hiding/disabled states for authorization. "
        "Enforce authorization server-side for all actions. Prefer not rendering "
        "unauthorized controls at all (or render in a non-actionable form)."
    ),
    "RolePermissionHint": (
        "Confirm all authorization decisions are enforced server-side. Avoid "
        "leaking internal role names or authorization flags to the client unless "
        "required."
    ),
    "InlineScriptSecretish": (
        "Avoid embedding secrets in client-side code. Use server-side sessions or "
        "retrieve short-lived tokens from protected endpoints with proper "
        "authorization."
    ),
    "DevtoolsBlocking": (
        "Treat DevTools detection as a speed bump, not a control. Anything shipped "
        "to the browser can be inspected; enforce authorization and protect "
        "sensitive data on the server."
    ),
}


def severity_for_actionable(confidence: int) -> Severity:
    """Map an actionable control's confidence to a severity band."""
    if confidence >= 85:
        return "High"
    if confidence >= 60:
        return "Medium"
    return "Low"


def severity_for_devtools(score: int) -> Severity:
    """Map a DevTools heuristic score to a severity band."""
    return "Medium" if score >= 65 else "Low"


def make_finding(
    finding_type: FindingType,
    severity: Severity,
    confidence: int,
    url: str,
    host: str,
    title: str,
    summary: str,
    evidence: str,
) -> Finding:
    """Create a finding model instance with the type's recommendation."""
    return Finding(
        type=finding_type,
        severity=severity,
        confidence=clamp(confidence),
        url=url,
        host=host,
        title=title,
        summary=summary,
        evidence=evidence,
        recommendation=RECOMMENDATIONS[finding_type],
    )
