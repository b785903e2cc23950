"""Detector for hidden or disabled controls that still look actionable.

Each candidate tag goes through three independent scorers:

- visibility/state classification (hidden, disabled, or both)
- action signals (handlers, form association, submit semantics, href, ...)
- risk vocabulary in the control's identifying attributes

The action score decides whether the control is actionable; the sum of the
confidence base and the action score becomes the finding's confidence.
"""

from __future__ import annotations

import re

from loguru import logger

from clientscan.findings import EVIDENCE_CHARS, make_finding, severity_for_actionable
from clientscan.limits import AnalyzerLimits
from clientscan.markup import MAX_TAG_CHARS, class_tokens, parse_attributes, shrink
from models import ControlSignals, Finding, clamp

CONTROL_TAG_RE = re.compile(
    rf"<(button|a|input|select|textarea|form|div|span)\b([^<>]{{0,{MAX_TAG_CHARS}}})>",
    re.IGNORECASE,
)
HIDDEN_STYLE_RE = re.compile(
    r"display\s*:\s*none|visibility\s*:\s*hidden"
    r"|opacity\s*:\s*(?:0+(?:\.0*)?|\.0+)\s*(?:[;!]|$)",
    re.IGNORECASE,
)

HIDDEN_CLASSES = {"hidden", "d-none"}
DISABLED_CLASSES = {"disabled", "pf-m-disabled", "is-disabled", "btn-disabled"}

INTERACTIVE_INPUT_TYPES = {"", "submit", "button", "image", "password", "reset"}
BUTTON_INPUT_TYPES = {"button", "submit", "image", "reset"}
CONTAINER_TAGS = {"div", "span"}

EVENT_HANDLER_ATTRIBUTES = ("onclick", "onmousedown", "onmouseup", "onchange")
FORM_ASSOCIATION_ATTRIBUTES = ("formaction", "formmethod", "form")
FORM_TAG_ATTRIBUTES = ("action", "method")
DATA_ACTION_ATTRIBUTES = ("data-action", "data-url", "data-endpoint", "data-method")
IDENTIFYING_ATTRIBUTES = (
    "id",
    "name",
    "value",
    "aria-label",
    "title",
    "href",
    "data-action",
    "data-url",
    "data-endpoint",
    "data-testid",
)

RISK_KEYWORDS = (
    "delete", "remove", "admin", "role", "permission", "privilege",
    "approve", "reject", "reset", "unlock", "disable", "enable",
    "export", "import", "service", "serviceaccount", "account",
    "sudo", "elevat", "impersonat", "grant", "revoke", "token", "key",
)
STATE_CHANGE_VERBS = ("save", "submit", "update", "create", "add", "apply", "confirm")
WIDGET_ID_IDIOMS = ("btn", "ctl00", "cphmain")

CONFIDENCE_BASE = 10
RISK_KEYWORD_POINTS = 8
RISK_KEYWORD_CAP = 30
WIDGET_ID_POINTS = 5
INFO_CONFIDENCE_RANGE = (15, 45)


def is_hidden(attributes: dict[str, str | None]) -> bool:
    """Return True when a non-accessibility hidden signal is present.

    Accessibility-only classes (``sr-only`` and friends) keep content
    available to screen readers and never count on their own.
    """
    if "hidden" in attributes:
        return True
    style = attributes.get("style") or ""
    if style and HIDDEN_STYLE_RE.search(style):
        return True
    tokens = class_tokens(attributes.get("class"))
    return bool(tokens & HIDDEN_CLASSES)


def is_disabled(attributes: dict[str, str | None]) -> bool:
    """Return True for disabled attributes, ARIA flags, or disabled classes."""
    if "disabled" in attributes:
        return True
    if (attributes.get("aria-disabled") or "").strip().lower() == "true":
        return True
    tokens = class_tokens(attributes.get("class"))
    return bool(tokens & DISABLED_CLASSES)


def identifying_text(attributes: dict[str, str | None]) -> str:
    """Join identifying attribute values into one lowercase search blob."""
    values = [attributes.get(name) or "" for name in IDENTIFYING_ATTRIBUTES]
    return " ".join(value for value in values if value).lower()


def score_action_signals(
    tag: str,
    attributes: dict[str, str | None],
    disabled: bool,
    signals: ControlSignals,
) -> None:
    """Add action-likelihood points for one candidate control."""
    if any(name in attributes for name in EVENT_HANDLER_ATTRIBUTES):
        signals.add_action(30, "event handler")

    form_attributes = FORM_ASSOCIATION_ATTRIBUTES
    if tag == "form":
        form_attributes = FORM_ASSOCIATION_ATTRIBUTES + FORM_TAG_ATTRIBUTES
    if any(name in attributes for name in form_attributes):
        signals.add_action(30, "form association")

    control_type = (attributes.get("type") or "").strip().lower()
    if control_type == "submit":
        signals.add_action(30, "submit")
    elif tag == "button" and "type" not in attributes:
        signals.add_action(30, "implicit submit")

    if disabled:
        signals.add_action(15, "client-side disabled gate")

    if "href" in attributes:
        href = (attributes.get("href") or "").strip().lower()
        if not href or href.startswith("#") or href.startswith("javascript:"):
            signals.add_action(10, "weak href")
        else:
            signals.add_action(25, "href target")

    if any(name in attributes for name in DATA_ACTION_ATTRIBUTES):
        signals.add_action(20, "data-* action hint")

    if tag == "button":
        signals.add_action(10, "button element")
    if tag == "input" and control_type in BUTTON_INPUT_TYPES:
        signals.add_action(15, "button-like input")

    if (attributes.get("role") or "").strip().lower() == "button":
        signals.add_action(10, "role=button")
    if "tabindex" in attributes:
        signals.add_action(5, "tabindex")

    text = identifying_text(attributes)
    if any(verb in text for verb in STATE_CHANGE_VERBS):
        signals.add_action(10, "state-change verb")

    signals.action_score = clamp(signals.action_score)


def score_risk_keywords(attributes: dict[str, str | None], signals: ControlSignals) -> None:
    """Add confidence points for privileged vocabulary in identifying attributes."""
    text = identifying_text(attributes)

    keyword_hits = sum(1 for keyword in RISK_KEYWORDS if keyword in text)
    if keyword_hits:
        signals.confidence_score += min(RISK_KEYWORD_CAP, keyword_hits * RISK_KEYWORD_POINTS)
        signals.reasons.append("risky keyword(s)")

    if any(idiom in text for idiom in WIDGET_ID_IDIOMS):
        signals.confidence_score += WIDGET_ID_POINTS
        signals.reasons.append("generated widget id")


def score_control(
    tag: str,
    attributes: dict[str, str | None],
    disabled: bool,
) -> ControlSignals:
    """Return the combined signals for one candidate control."""
    signals = ControlSignals(confidence_score=CONFIDENCE_BASE)
    score_action_signals(tag, attributes, disabled, signals)
    score_risk_keywords(attributes, signals)
    return signals


def _state_label(hidden: bool, disabled: bool) -> str:
    if hidden and disabled:
        return "hidden & disabled"
    return "hidden" if hidden else "disabled"


def detect_hidden_controls(
    html: str,
    url: str,
    host: str,
    limits: AnalyzerLimits,
) -> list[Finding]:
    """Detect hidden/disabled controls in markup with script/style removed."""
    findings: list[Finding] = []
    candidates = 0

    for match in CONTROL_TAG_RE.finditer(html):
        tag = match.group(1).lower()
        attributes = parse_attributes(match.group(2))

        hidden = is_hidden(attributes)
        disabled = is_disabled(attributes)
        if not (hidden or disabled):
            continue

        if tag == "input":
            input_type = (attributes.get("type") or "").strip().lower()
            if input_type not in INTERACTIVE_INPUT_TYPES:
                continue

        if candidates >= limits.max_matches_per_detector:
            logger.warning(
                f"Control detector stopped at {candidates} candidates for {url or '<no url>'}"
            )
            break
        candidates += 1

        signals = score_control(tag, attributes, disabled)
        confidence = clamp(signals.confidence_score + signals.action_score)

        if signals.actionable:
            severity = severity_for_actionable(confidence)
        elif tag in CONTAINER_TAGS:
            continue
        else:
            severity = "Info"
            confidence = clamp(confidence, *INFO_CONFIDENCE_RANGE)

        state = _state_label(hidden, disabled)
        why = f" Signals: {', '.join(signals.reasons)}." if signals.reasons else ""
        outlook = (
            "It looks actionable if re-enabled."
            if signals.actionable
            else "No strong action signal was found."
        )
        findings.append(
            make_finding(
                finding_type="HiddenOrDisabledControl",
                severity=severity,
                confidence=confidence,
                url=url,
                host=host,
                title=f"Client-side {state} control present in HTML",
                summary=(
                    f"An interactive <{tag}> is present in the HTML but is {state} on "
                    "the client side. If server-side authorization is missing, users "
                    f"may be able to enable or trigger privileged actions. {outlook}{why}"
                ),
                evidence=shrink(match.group(0), EVIDENCE_CHARS),
            )
        )

    return findings
