"""Detector for password values echoed into markup."""

from __future__ import annotations

import re

from loguru import logger

from clientscan.findings import PASSWORD_EVIDENCE_CHARS, make_finding
from clientscan.limits import AnalyzerLimits
from clientscan.markup import MAX_TAG_CHARS, parse_attributes, shrink
from models import Finding

INPUT_TAG_RE = re.compile(rf"<input\b([^<>]{{0,{MAX_TAG_CHARS}}})>", re.IGNORECASE)
MASK_VALUE_RE = re.compile(r"^(?:[*•●·]+|[xX]{3,})$")

BASE_CONFIDENCE = 95
EMPTY_VALUE_CONFIDENCE = 70
PLACEHOLDER_VALUE_CONFIDENCE = 75


def _redact_preview(value: str) -> str:
    """Return a short preview that never reveals a whole password."""
    trimmed = value.strip()
    if len(trimmed) <= 6:
        return "REDACTED"
    return trimmed[:3] + "…"


def _password_confidence(value: str) -> int:
    trimmed = value.strip()
    if not trimmed:
        return EMPTY_VALUE_CONFIDENCE
    if trimmed.lower() == "password" or MASK_VALUE_RE.match(trimmed):
        return PLACEHOLDER_VALUE_CONFIDENCE
    return BASE_CONFIDENCE


def detect_password_values(
    html: str,
    url: str,
    host: str,
    limits: AnalyzerLimits,
) -> list[Finding]:
    """Detect ``<input type=password>`` tags that carry a value attribute."""
    findings: list[Finding] = []

    for match in INPUT_TAG_RE.finditer(html):
        attributes = parse_attributes(match.group(1))
        input_type = (attributes.get("type") or "").strip().lower()
        if input_type != "password" or attributes.get("value") is None:
            continue

        if len(findings) >= limits.max_matches_per_detector:
            logger.warning(
                f"Password detector stopped at {len(findings)} matches for {url or '<no url>'}"
            )
            break

        value = attributes["value"] or ""
        findings.append(
            make_finding(
                finding_type="PasswordValueInDom",
                severity="High",
                confidence=_password_confidence(value),
                url=url,
                host=host,
                title="Password value present in HTML",
                summary=(
                    'An <input type="password"> includes a value attribute in the '
                    "HTML (preview: "
                    f"{_redact_preview(value)}). Users can reveal it via DevTools "
                    "or intercepting proxies."
                ),
                evidence=shrink(match.group(0), PASSWORD_EVIDENCE_CHARS),
            )
        )

    return findings
