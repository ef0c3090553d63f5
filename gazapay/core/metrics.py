"""Lightweight in-memory metrics collector."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Dict


@dataclass
class MetricSnapshot:
    total_requests: int
    intents: Dict[str, int]
    stages: Dict[str, int]


class MetricsCollector:
    """Thread-safe counters for dialogue turns."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total_requests = 0
        self._intents: Counter[str] = Counter()
        self._stages: Counter[str] = Counter()

    def record_request(self, intent: str, stage: str) -> None:
        with self._lock:
            self._total_requests += 1
            self._intents[intent] += 1
            self._stages[stage] += 1

    def snapshot(self) -> MetricSnapshot:
        with self._lock:
            return MetricSnapshot(
                total_requests=self._total_requests,
                intents=dict(self._intents),
                stages=dict(self._stages),
            )
