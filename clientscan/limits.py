"""Configurable scanning bounds for the analyzer."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_INPUT_CHARS = 2_000_000
"""Longest page text analyzed; the remainder is ignored."""

DEFAULT_MAX_SCRIPT_CHARS = 200_000
"""Longest inline script body scanned by script-level heuristics."""

DEFAULT_MAX_MATCHES_PER_DETECTOR = 500
"""Cap on qualifying candidates a single detector examines per page."""

DEFAULT_MAX_FINDINGS_PER_DETECTOR = 50
"""Cap on findings a single script-level detector emits per page."""


def _env_int(
    name: str,
    default: int,
    *,
    min_value: int = 0,
    max_value: int | None = None,
) -> int:
    """Return a bounded integer limit sourced from the environment."""

    raw = os.getenv(name)
    if not raw or not raw.strip():
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    if parsed < min_value:
        return default
    if max_value is not None and parsed > max_value:
        return max_value
    return parsed


@dataclass(frozen=True)
class AnalyzerLimits:
    """Container describing every configurable analyzer bound."""

    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS
    max_script_chars: int = DEFAULT_MAX_SCRIPT_CHARS
    max_matches_per_detector: int = DEFAULT_MAX_MATCHES_PER_DETECTOR
    max_findings_per_detector: int = DEFAULT_MAX_FINDINGS_PER_DETECTOR

    @classmethod
    def from_env(cls) -> "AnalyzerLimits":
        """Return a limit set using the configured environment variables."""

        return cls(
            max_input_chars=_env_int(
                "CLIENTSCAN_MAX_INPUT_CHARS",
                DEFAULT_MAX_INPUT_CHARS,
                min_value=1,
            ),
            max_script_chars=_env_int(
                "CLIENTSCAN_MAX_SCRIPT_CHARS",
                DEFAULT_MAX_SCRIPT_CHARS,
                min_value=1,
            ),
            max_matches_per_detector=_env_int(
                "CLIENTSCAN_MAX_MATCHES_PER_DETECTOR",
                DEFAULT_MAX_MATCHES_PER_DETECTOR,
                min_value=1,
            ),
            max_findings_per_detector=_env_int(
                "CLIENTSCAN_MAX_FINDINGS_PER_DETECTOR",
                DEFAULT_MAX_FINDINGS_PER_DETECTOR,
                min_value=1,
            ),
        )


DEFAULT_LIMITS = AnalyzerLimits()
