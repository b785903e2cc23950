"""Heuristic detection of client-side-only authorization signals in HTML."""

from clientscan.engine import analyze, scan
from clientscan.limits import AnalyzerLimits
from clientscan.store import FindingStore

__all__ = ["AnalyzerLimits", "FindingStore", "analyze", "scan"]
