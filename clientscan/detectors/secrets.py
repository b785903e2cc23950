"""Detector for secret-like values embedded in inline scripts."""

from __future__ import annotations

import re
from itertools import islice

from clientscan.findings import EVIDENCE_CHARS, make_finding
from clientscan.limits import AnalyzerLimits
from clientscan.markup import iter_script_bodies, shrink
from models import Finding

SECRET_KEYWORD = r"(?:api[_-]?key|secret|bearer|token)"

SECRET_ASSIGNMENT_RE = re.compile(
    SECRET_KEYWORD
    + r"""\w{0,30}['"]?\s*[:=]\s*"""
    + r"""(?:"[^"\r\n]{20,4096}"|'[^'\r\n]{20,4096}'|`[^`]{20,4096}`)""",
    re.IGNORECASE,
)
JWT_HEADER_PREFIX = "eyJ"
SECRET_KEYWORD_RE = re.compile(SECRET_KEYWORD, re.IGNORECASE)
# Hex runs of 32+ characters are covered by the base64 class.
LONG_TOKEN_RE = re.compile(r"[A-Za-z0-9+/]{30,}={0,2}")

KEYWORD_PROXIMITY_CHARS = 80
SECRETISH_CONFIDENCE = 30


def _keyword_near_token(body: str, max_matches: int) -> bool:
    """Return True when a secret keyword sits within range of a long token."""
    keyword_spans = [m.span() for m in islice(SECRET_KEYWORD_RE.finditer(body), max_matches)]
    if not keyword_spans:
        return False
    token_spans = [m.span() for m in islice(LONG_TOKEN_RE.finditer(body), max_matches)]

    for keyword_start, keyword_end in keyword_spans:
        for token_start, token_end in token_spans:
            if token_start >= keyword_end:
                gap = token_start - keyword_end
            elif keyword_start >= token_end:
                gap = keyword_start - token_end
            else:
                gap = 0
            if gap <= KEYWORD_PROXIMITY_CHARS:
                return True
    return False


def _has_jwt_shape(body: str) -> bool:
    """Return True when a JWT header prefix is followed anywhere later by a dot."""
    header_start = body.find(JWT_HEADER_PREFIX)
    if header_start < 0:
        return False
    return body.find(".", header_start + len(JWT_HEADER_PREFIX)) >= 0


def looks_secretish(body: str, max_matches: int = 500) -> str | None:
    """Return the reason a script body looks secret-bearing, or None."""
    if SECRET_ASSIGNMENT_RE.search(body):
        return "secret-like keyword assigned to a long quoted literal"
    if _has_jwt_shape(body):
        return "JWT-shaped value"
    if _keyword_near_token(body, max_matches):
        return "secret-like keyword near a long base64/hex token"
    return None


def detect_inline_secrets(
    html: str,
    url: str,
    host: str,
    limits: AnalyzerLimits,
) -> list[Finding]:
    """Detect inline script bodies that appear to carry credentials."""
    findings: list[Finding] = []
    seen_evidence: set[str] = set()

    for body in iter_script_bodies(html, limits.max_script_chars):
        if len(findings) >= limits.max_findings_per_detector:
            break

        reason = looks_secretish(body, limits.max_matches_per_detector)
        if reason is None:
            continue

        evidence = shrink(body, EVIDENCE_CHARS)
        if evidence in seen_evidence:
            continue
        seen_evidence.add(evidence)

        findings.append(
            make_finding(
                finding_type="InlineScriptSecretish",
                severity="Low",
                confidence=SECRETISH_CONFIDENCE,
                url=url,
                host=host,
                title="Potential secret-like value in inline script",
                summary=(
                    f"Inline script content matched a heuristic ({reason}). It may "
                    "include credentials, tokens, or keys. This is heuristic and can "
                    "generate false positives."
                ),
                evidence=evidence,
            )
        )

    return findings
