"""Detector for role/permission vocabulary exposed in markup."""

from __future__ import annotations

import re

from clientscan.findings import EVIDENCE_CHARS, make_finding
from clientscan.limits import AnalyzerLimits
from clientscan.markup import context_window, shrink
from models import Finding

ROLE_HINT_RE = re.compile(
    r"\b(?P<keyword>permission|authorize|isadmin|is_admin|acl|rbac|privilege)\b"
    r"|\b(?:data-role|user_?role|role)['\"]?\s*[:=]\s*['\"]?"
    r"(?P<role>admin|superuser|owner|manager|privileged|staff)\b",
    re.IGNORECASE,
)

ROLE_HINT_CONFIDENCE = 35


def detect_role_hints(
    html: str,
    url: str,
    host: str,
    limits: AnalyzerLimits,
) -> list[Finding]:
    """Emit at most one informational finding for the first role/permission hint."""
    match = ROLE_HINT_RE.search(html)
    if match is None:
        return []

    if match.group("keyword"):
        matched = f"keyword '{match.group('keyword')}'"
    else:
        matched = f"privileged role value '{match.group('role')}'"

    return [
        make_finding(
            finding_type="RolePermissionHint",
            severity="Info",
            confidence=ROLE_HINT_CONFIDENCE,
            url=url,
            host=host,
            title="Role/permission hints found in HTML",
            summary=(
                f"The page contains role/permission-related markup ({matched}). This "
                "may help locate authorization logic or UI gating, but is not "
                "necessarily a vulnerability on its own."
            ),
            evidence=shrink(context_window(html, match.start(), match.end()), EVIDENCE_CHARS),
        )
    ]
