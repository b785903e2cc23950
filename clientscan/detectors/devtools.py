"""Detector for inline scripts that try to detect or block DevTools.

Each script body accumulates points from independent idioms. The weights
are fixed heuristics; a body needs 40 points to be reported.
"""

from __future__ import annotations

import re

from clientscan.findings import EVIDENCE_CHARS, make_finding, severity_for_devtools
from clientscan.limits import AnalyzerLimits
from clientscan.markup import context_window, iter_script_bodies, shrink
from models import DevtoolsSignals, Finding

DEVTOOLS_KEYWORD_RE = re.compile(r"dev[\s_-]?tools", re.IGNORECASE)
DEVTOOLS_OPENED_RE = re.compile(
    r"dev_?tools\W{0,3}(?:is_?)?open(?:ed)?\b|devtoolschange",
    re.IGNORECASE,
)
IS_DEVTOOLS_OPEN_RE = re.compile(r"is_?dev_?tools_?open", re.IGNORECASE)
DISABLE_ON_OPEN_RE = re.compile(
    r"(?:disable|block|prevent|lock)[\w.\s]{0,24}dev_?tools"
    r"|dev_?tools[\w.\s]{0,24}(?:disable|block|prevent|lock)"
    r"|on_?dev_?tools_?open",
    re.IGNORECASE,
)
OUTER_WIDTH_RE = re.compile(r"\bouterWidth\b")
INNER_WIDTH_RE = re.compile(r"\binnerWidth\b")
OUTER_HEIGHT_RE = re.compile(r"\bouterHeight\b")
INNER_HEIGHT_RE = re.compile(r"\binnerHeight\b")
WIDTH_DELTA_RE = re.compile(
    r"outerWidth\s*-\s*(?:window\s*\.\s*)?innerWidth"
    r"|innerWidth\s*-\s*(?:window\s*\.\s*)?outerWidth"
)
HEIGHT_DELTA_RE = re.compile(
    r"outerHeight\s*-\s*(?:window\s*\.\s*)?innerHeight"
    r"|innerHeight\s*-\s*(?:window\s*\.\s*)?outerHeight"
)
ABS_CALL_RE = re.compile(r"Math\s*\.\s*abs\s*\(")
THRESHOLD_160_RE = re.compile(r"(?<![\w.])160(?![\w.])")
DEBUGGER_RE = re.compile(r"\bdebugger\b")
TIMER_RE = re.compile(r"\bset(?:Interval|Timeout)\s*\(")
ANIMATION_FRAME_RE = re.compile(r"\brequestAnimationFrame\b")
RESIZE_LISTENER_RE = re.compile(
    r"addEventListener\s*\(\s*['\"]resize['\"]|\bonresize\s*=",
)
CONSOLE_OVERRIDE_RE = re.compile(
    r"console\s*\.\s*(?:clear|log|profile)\s*=(?!=)"
    r"|console\s*\.\s*(?:clear|profile(?:End)?)\s*\(",
)
FUNCTION_TO_STRING_RE = re.compile(
    r"\.toString\s*=(?!=)|Function\s*\.\s*prototype\s*\.\s*toString",
)
TIMING_PROBE_RE = re.compile(
    r"performance\s*\.\s*now\s*\(|Date\s*\.\s*now\s*\(|new\s+Date\s*\(\s*\)\s*\.\s*getTime",
)
CHROME_RE = re.compile(r"chrome", re.IGNORECASE)

REPORT_THRESHOLD = 40
PAGE_HINT_CONFIDENCE = 30


def score_devtools_script(body: str) -> DevtoolsSignals:
    """Accumulate the DevTools-detection score for one script body."""
    signals = DevtoolsSignals()

    mentions_devtools = DEVTOOLS_KEYWORD_RE.search(body) is not None
    if mentions_devtools:
        signals.add(30, "devtools keyword")
    if DEVTOOLS_OPENED_RE.search(body):
        signals.add(30, "devtools-open idiom")
    if IS_DEVTOOLS_OPEN_RE.search(body):
        signals.add(20, "isDevToolsOpen idiom")
    if DISABLE_ON_OPEN_RE.search(body):
        signals.add(25, "disable-on-open idiom")

    if OUTER_WIDTH_RE.search(body) and INNER_WIDTH_RE.search(body):
        signals.add(25, "outer/inner width comparison")
    if OUTER_HEIGHT_RE.search(body) and INNER_HEIGHT_RE.search(body):
        signals.add(20, "outer/inner height comparison")

    has_delta = False
    if WIDTH_DELTA_RE.search(body):
        signals.add(15, "width delta expression")
        has_delta = True
    if HEIGHT_DELTA_RE.search(body):
        signals.add(15, "height delta expression")
        has_delta = True
    if has_delta and ABS_CALL_RE.search(body):
        signals.add(10, "absolute delta")
    if has_delta and THRESHOLD_160_RE.search(body):
        signals.add(10, "160px threshold")

    if DEBUGGER_RE.search(body):
        signals.add(20, "debugger statement")
    if TIMER_RE.search(body):
        signals.add(12, "timer")
    if ANIMATION_FRAME_RE.search(body):
        signals.add(8, "animation frame loop")
    if RESIZE_LISTENER_RE.search(body):
        signals.add(10, "resize listener")
    if CONSOLE_OVERRIDE_RE.search(body):
        signals.add(10, "console override")
    if FUNCTION_TO_STRING_RE.search(body):
        signals.add(10, "toString trap")
    if TIMING_PROBE_RE.search(body):
        signals.add(8, "timing probe")
    if mentions_devtools and CHROME_RE.search(body):
        signals.add(10, "chrome devtools mention")

    return signals


def detect_devtools_blocking(
    html: str,
    url: str,
    host: str,
    limits: AnalyzerLimits,
) -> list[Finding]:
    """Detect inline scripts that look like DevTools detection or blocking."""
    candidates: list[Finding] = []
    seen_evidence: set[str] = set()

    for body in iter_script_bodies(html, limits.max_script_chars):
        if len(candidates) >= limits.max_findings_per_detector:
            break

        signals = score_devtools_script(body)
        score = signals.clamped()
        if score < REPORT_THRESHOLD:
            continue

        evidence = shrink(body, EVIDENCE_CHARS)
        if evidence in seen_evidence:
            continue
        seen_evidence.add(evidence)

        candidates.append(
            make_finding(
                finding_type="DevtoolsBlocking",
                severity=severity_for_devtools(score),
                confidence=score,
                url=url,
                host=host,
                title="DevTools detection or blocking logic in inline script",
                summary=(
                    "Inline script combines idioms commonly used to detect or "
                    f"obstruct browser DevTools. Signals: {', '.join(signals.reasons)}. "
                    "Such logic often guards client-side-only restrictions."
                ),
                evidence=evidence,
            )
        )

    if candidates:
        return sorted(candidates, key=lambda finding: -finding.confidence)

    page_mention = DEVTOOLS_KEYWORD_RE.search(html)
    if page_mention is None:
        return []

    return [
        make_finding(
            finding_type="DevtoolsBlocking",
            severity="Info",
            confidence=PAGE_HINT_CONFIDENCE,
            url=url,
            host=host,
            title="DevTools-related reference in page",
            summary=(
                "The page mentions DevTools but no inline script scored high enough "
                "to indicate active detection. Review external scripts manually."
            ),
            evidence=shrink(
                context_window(html, page_mention.start(), page_mention.end()),
                EVIDENCE_CHARS,
            ),
        )
    ]
