"""Analyzer engine implementation.

Limitations:
- No DOM tree or CSS cascade; tags and attributes are read from raw text
- No external script fetching; only inline script bodies are inspected
- Heuristic signals only, never proof of a missing server-side check
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from time import perf_counter
from typing import Any

from loguru import logger

from clientscan.detectors import (
    detect_devtools_blocking,
    detect_hidden_controls,
    detect_inline_secrets,
    detect_password_values,
    detect_role_hints,
)
from clientscan.filesystem import collect_source_files
from clientscan.limits import DEFAULT_LIMITS, AnalyzerLimits
from clientscan.markup import host_from_url, strip_scripts_and_styles
from clientscan.store import FindingStore
from models import SEVERITY_ORDER, Finding, severity_rank

Detector = Callable[[str, str, str, AnalyzerLimits], list[Finding]]

# (name, detector, runs on the script/style-stripped view)
DETECTORS: tuple[tuple[str, Detector, bool], ...] = (
    ("password", detect_password_values, False),
    ("controls", detect_hidden_controls, True),
    ("role_hints", detect_role_hints, True),
    ("inline_secrets", detect_inline_secrets, False),
    ("devtools", detect_devtools_blocking, False),
)


def analyze(
    url: str | None,
    html: str | None,
    limits: AnalyzerLimits | None = None,
) -> list[Finding]:
    """Analyze one response body and return findings in detector order."""
    if not html or not isinstance(html, str) or not html.strip():
        return []

    limits = limits or DEFAULT_LIMITS
    url = url if isinstance(url, str) else ""
    host = host_from_url(url)
    raw_view = html[: limits.max_input_chars]
    stripped_view = strip_scripts_and_styles(raw_view)

    findings: list[Finding] = []
    for name, detector, uses_stripped_view in DETECTORS:
        view = stripped_view if uses_stripped_view else raw_view
        try:
            findings.extend(detector(view, url, host, limits))
        except Exception as exc:
            logger.warning(f"Detector '{name}' failed for {url or '<no url>'}: {exc}")
    return findings


def _url_for_file(file_path: Path, root_path: Path, base_url: str | None) -> str:
    """Build the URL reported for a scanned file."""
    if not base_url:
        return file_path.as_uri()

    if root_path.is_file():
        relative_file = file_path.name
    else:
        try:
            relative_file = file_path.relative_to(root_path).as_posix()
        except ValueError:
            relative_file = file_path.name
    return f"{base_url.rstrip('/')}/{relative_file}"


def _sort_key(finding: Finding) -> tuple[int, str, str, str]:
    return (severity_rank(finding.severity), finding.url, finding.type, finding.stable_key)


def scan(
    path: str,
    *,
    base_url: str | None = None,
    min_severity: str = "Info",
    limits: AnalyzerLimits | None = None,
) -> dict[str, Any]:
    """Scan HTML files on disk and return the summary/findings payload."""
    started_at = perf_counter()
    root_path = Path(path).resolve()
    source_files = sorted(collect_source_files(path))
    limits = limits or AnalyzerLimits.from_env()
    store = FindingStore()
    scanned_files = 0
    skipped_files = 0

    for source_file in source_files:
        file_path = Path(source_file)
        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            logger.warning(f"Skipping file with unicode decode error: {file_path} ({exc})")
            skipped_files += 1
            continue
        except OSError as exc:
            logger.warning(f"Skipping unreadable file: {file_path} ({exc})")
            skipped_files += 1
            continue

        url = _url_for_file(file_path, root_path, base_url)
        file_findings = analyze(url, content, limits)
        added = store.add(file_findings)
        scanned_files += 1
        logger.debug(f"[DEBUG] {url}: {len(file_findings)} findings ({added} new)")

    threshold = severity_rank(min_severity)
    selected_findings = sorted(
        (
            finding
            for finding in store.findings(include_false_positives=False)
            if severity_rank(finding.severity) <= threshold
        ),
        key=_sort_key,
    )
    by_severity = {severity: 0 for severity in SEVERITY_ORDER}
    for finding in selected_findings:
        by_severity[finding.severity] += 1
    duration_ms = int((perf_counter() - started_at) * 1000)

    return {
        "summary": {
            "scanned_files": scanned_files,
            "skipped_files": skipped_files,
            "findings_count": len(selected_findings),
            "by_severity": by_severity,
            "duration_ms": duration_ms,
        },
        "findings": [finding.to_dict() for finding in selected_findings],
    }
