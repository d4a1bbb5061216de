"""Lightweight in-memory metrics collector."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Dict


@dataclass
class MetricSnapshot:
    total_requests: int
    requests_by_kind: Dict[str, int]
    outcomes: Dict[str, int]
    upstream_failures: Dict[str, int]


class MetricsCollector:
    """Thread-safe counter storage for basic service metrics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total_requests = 0
        self._kinds: Counter[str] = Counter()
        self._outcomes: Counter[str] = Counter()
        self._upstream_failures: Counter[str] = Counter()

    def record_request(self, kind: str, outcome: str) -> None:
        with self._lock:
            self._total_requests += 1
            self._kinds[kind] += 1
            self._outcomes[outcome] += 1

    def record_upstream_failure(self, provider: str) -> None:
        with self._lock:
            self._upstream_failures[provider] += 1

    def snapshot(self) -> MetricSnapshot:
        with self._lock:
            return MetricSnapshot(
                total_requests=self._total_requests,
                requests_by_kind=dict(self._kinds),
                outcomes=dict(self._outcomes),
                upstream_failures=dict(self._upstream_failures),
            )
