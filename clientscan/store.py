"""Keyed accumulation of findings across many analyzed pages."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Iterable

from loguru import logger

from models import Finding

DEFAULT_CAPACITY = 5000


class FindingStore:
    """Deduplicate findings by stable key with oldest-first eviction.

    The first finding stored under a key is kept, so ``first_seen`` reflects
    the earliest sighting. False-positive flags live beside the findings and
    are dropped when their finding is evicted.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._findings: OrderedDict[str, Finding] = OrderedDict()
        self._false_positives: set[str] = set()
        self._lock = threading.Lock()

    def add(self, findings: Iterable[Finding]) -> int:
        """Store findings and return how many new keys were inserted."""
        added = 0
        with self._lock:
            for finding in findings:
                key = finding.stable_key
                if key in self._findings:
                    continue
                self._findings[key] = finding
                added += 1

            while len(self._findings) > self.capacity:
                evicted_key, _ = self._findings.popitem(last=False)
                self._false_positives.discard(evicted_key)
                logger.debug(f"Evicted oldest finding: {evicted_key}")
        return added

    def get(self, key: str) -> Finding | None:
        with self._lock:
            return self._findings.get(key)

    def mark_false_positive(self, key: str, flagged: bool = True) -> bool:
        """Set or clear the false-positive flag; return False for unknown keys."""
        with self._lock:
            if key not in self._findings:
                return False
            if flagged:
                self._false_positives.add(key)
            else:
                self._false_positives.discard(key)
            return True

    def is_false_positive(self, key: str) -> bool:
        with self._lock:
            return key in self._false_positives

    def findings(self, include_false_positives: bool = True) -> list[Finding]:
        """Return stored findings in insertion order."""
        with self._lock:
            return [
                finding
                for key, finding in self._findings.items()
                if include_false_positives or key not in self._false_positives
            ]

    def clear(self) -> None:
        with self._lock:
            self._findings.clear()
            self._false_positives.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._findings)
