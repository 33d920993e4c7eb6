from prometheus_client import Counter, Histogram

from app.schemas.status import CheckResult

probe_counter = Counter(
    "instance_probes_total",
    "Total health probes sent to monitored instances",
    ["instance", "status"]
)
probe_latency = Histogram(
    "instance_probe_latency_seconds",
    "Latency of health probes that received a response",
    ["instance"]
)
cache_lookup_counter = Counter(
    "status_cache_lookups_total",
    "Status cache lookups by result",
    ["result"]
)


def record_probe(result: CheckResult) -> None:
    probe_counter.labels(instance=result.id, status=result.status.value).inc()
    if result.latency_ms is not None:
        probe_latency.labels(instance=result.id).observe(result.latency_ms / 1000)


def record_cache_lookup(hit: bool) -> None:
    cache_lookup_counter.labels(result="hit" if hit else "miss").inc()
