"""Prometheus metrics for trip planning."""

from prometheus_client import Counter, Histogram

# Planning metrics
trip_plans_total = Counter(
    "trip_plans_total",
    "Total trip planning requests by outcome",
    ["outcome"],
)

attraction_source_total = Counter(
    "attraction_source_total",
    "Attraction lists served, by source",
    ["source"],
)

attraction_fetch_latency_ms = Histogram(
    "attraction_fetch_latency_ms",
    "Attraction fetch latency in milliseconds",
    ["source"],
    buckets=[10, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 20000],
)


class PrometheusPlanMetrics:
    """Prometheus-based planning metrics implementation."""

    def inc_plan(self, outcome: str) -> None:
        """Increment plan outcome counter."""
        trip_plans_total.labels(outcome=outcome).inc()

    def inc_source(self, source: str) -> None:
        """Increment attraction source counter."""
        attraction_source_total.labels(source=source).inc()

    def record_fetch_latency(self, source: str, latency_ms: float) -> None:
        """Record attraction fetch latency."""
        attraction_fetch_latency_ms.labels(source=source).observe(latency_ms)
