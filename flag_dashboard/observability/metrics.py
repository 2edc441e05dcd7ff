"""
In-process metrics.

Counters, timings and gauges live in memory for the lifetime of the
process and are reported by ``GET /health``. Series are keyed by metric
name and then by their sorted ``k=v`` tags (``default`` when untagged).
"""

import logging
import time
from collections import defaultdict
from contextlib import contextmanager
from threading import Lock
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

Tags = Optional[Dict[str, str]]


def tag_key(tags: Tags) -> str:
    if not tags:
        return 'default'
    return ','.join(f"{k}={v}" for k, v in sorted(tags.items()))


def summarize(values: List[float]) -> Dict[str, float]:
    """count/min/max/avg and nearest-rank p50/p95 of a timing series."""
    ordered = sorted(values)
    n = len(ordered)
    return {
        'count': n,
        'min': ordered[0],
        'max': ordered[-1],
        'avg': sum(ordered) / n,
        'p50': ordered[int(n * 0.5)],
        'p95': ordered[min(int(n * 0.95), n - 1)],
    }


class MetricsCollector:
    """
    Thread-safe metric store.

    Recording calls are no-ops while the collector is disabled
    (``METRICS_ENABLED=false``).
    """

    def __init__(self):
        self._lock = Lock()
        self._enabled = True
        self._counters: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self._timings: Dict[str, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))
        self._gauges: Dict[str, Dict[str, float]] = defaultdict(dict)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self):
        self._enabled = True
        logger.info("Metrics collection enabled")

    def disable(self):
        self._enabled = False
        logger.info("Metrics collection disabled")

    def increment(self, metric_name: str, value: int = 1, tags: Tags = None):
        """
        Example:
            metrics.increment('flags_api_requests_total', tags={'operation': 'list', 'status': '200'})
        """
        if self._enabled:
            with self._lock:
                self._counters[metric_name][tag_key(tags)] += value

    def timing(self, metric_name: str, duration_ms: float, tags: Tags = None):
        if self._enabled:
            with self._lock:
                self._timings[metric_name][tag_key(tags)].append(duration_ms)

    def gauge(self, metric_name: str, value: float, tags: Tags = None):
        """Overwrite the current value of a gauge, e.g. ``flags_total``."""
        if self._enabled:
            with self._lock:
                self._gauges[metric_name][tag_key(tags)] = value

    @contextmanager
    def timer(self, metric_name: str, tags: Tags = None) -> Iterator[None]:
        """
        Record the duration of a block as a timing, also when it raises.

        Example:
            with metrics.timer('dashboard_render_ms'):
                html = render_template('dashboard.html', dashboard=dashboard)
        """
        started = time.perf_counter()
        try:
            yield
        finally:
            self.timing(metric_name, (time.perf_counter() - started) * 1000, tags)

    def get_summary(self) -> Dict[str, Any]:
        """
        Returns:
            {'counters': {...}, 'timings': {name: {tags: summarize(...)}}, 'gauges': {...}}
        """
        with self._lock:
            return {
                'counters': {name: dict(series) for name, series in self._counters.items()},
                'timings': {
                    name: {key: summarize(values) for key, values in series.items() if values}
                    for name, series in self._timings.items()
                },
                'gauges': {name: dict(series) for name, series in self._gauges.items()},
            }

    def reset(self):
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._gauges.clear()
        logger.debug("Metrics reset")


# Global metrics instance
metrics = MetricsCollector()
