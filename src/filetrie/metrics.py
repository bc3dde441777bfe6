"""metrics.py - Prometheus metrics for FileTrie operations"""

from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge


@dataclass(frozen=True)
class TrieMetrics:
    operations: Counter
    scanned_records: Counter
    pruned_directories: Counter
    distinct_keys: Gauge

    def observe(self, operation: str, ok: bool) -> None:
        self.operations.labels(operation=operation, outcome="ok" if ok else "fail").inc()


def create_metrics(registry: CollectorRegistry | None = None) -> TrieMetrics:
    """Build a metric set bound to ``registry`` (the global one by default)."""
    registry = registry or REGISTRY
    return TrieMetrics(
        operations=Counter(
            "filetrie_operations_total",
            "Store operations by name and outcome",
            ["operation", "outcome"],
            registry=registry,
        ),
        scanned_records=Counter(
            "filetrie_scanned_records_total",
            "Records read from leaf files during prefix scans",
            registry=registry,
        ),
        pruned_directories=Counter(
            "filetrie_pruned_directories_total",
            "Empty directories removed after a leaf file was deleted",
            registry=registry,
        ),
        distinct_keys=Gauge(
            "filetrie_distinct_keys",
            "Distinct original keys currently stored",
            ["root"],
            registry=registry,
        ),
    )


_default_metrics: TrieMetrics | None = None


def default_metrics() -> TrieMetrics:
    """Metric set on the global registry, created on first use."""
    global _default_metrics
    if _default_metrics is None:
        _default_metrics = create_metrics()
    return _default_metrics
