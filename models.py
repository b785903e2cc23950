"""Data models for client-side authorization findings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from hashlib import sha1
from typing import Literal

FindingType = Literal[
    "PasswordValueInDom",
    "HiddenOrDisabledControl",
    "RolePermissionHint",
    "InlineScriptSecretish",
    "DevtoolsBlocking",
]
Severity = Literal["High", "Medium", "Low", "Info"]

SEVERITY_ORDER: tuple[Severity, ...] = ("High", "Medium", "Low", "Info")
EVIDENCE_DIGEST_LENGTH = 16
ACTIONABLE_THRESHOLD = 60


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    """Clamp an integer score into ``[low, high]``."""
    return max(low, min(high, value))


def severity_rank(severity: str) -> int:
    """Return sort rank for a severity label (High first, unknown last)."""
    try:
        return SEVERITY_ORDER.index(severity)  # type: ignore[arg-type]
    except ValueError:
        return len(SEVERITY_ORDER)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Finding:
    """Structured finding model."""

    type: FindingType
    severity: Severity
    confidence: int
    url: str
    host: str
    title: str
    summary: str
    evidence: str
    recommendation: str
    first_seen: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp(int(self.confidence)))

    @property
    def evidence_digest(self) -> str:
        """Return the short sha1 digest of the evidence text."""
        return sha1(self.evidence.encode("utf-8")).hexdigest()[:EVIDENCE_DIGEST_LENGTH]

    @property
    def stable_key(self) -> str:
        """Return deduplication key derived from type, url, and evidence."""
        return f"{self.type}|{self.url}|{self.evidence_digest}"

    def to_dict(self) -> dict[str, str | int]:
        """Serialize finding to dictionary output."""
        return {
            "stable_key": self.stable_key,
            "type": self.type,
            "severity": self.severity,
            "confidence": self.confidence,
            "url": self.url,
            "host": self.host,
            "title": self.title,
            "summary": self.summary,
            "evidence": self.evidence,
            "recommendation": self.recommendation,
            "first_seen": self.first_seen.isoformat(),
        }


@dataclass
class ControlSignals:
    """Score accumulators for one hidden or disabled control candidate."""

    action_score: int = 0
    confidence_score: int = 10
    reasons: list[str] = field(default_factory=list)

    @property
    def actionable(self) -> bool:
        return self.action_score >= ACTIONABLE_THRESHOLD

    def add_action(self, points: int, reason: str) -> None:
        self.action_score += points
        self.reasons.append(reason)


@dataclass
class DevtoolsSignals:
    """Score accumulator for one inline script body."""

    score: int = 0
    reasons: list[str] = field(default_factory=list)

    def add(self, points: int, reason: str) -> None:
        self.score += points
        self.reasons.append(reason)

    def clamped(self) -> int:
        return clamp(self.score)
