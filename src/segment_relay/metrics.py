"""
Prometheus metrics for the segmentation relay.

Provides instrumentation for:
- Inbound request outcomes
- Per-segment delivery outcomes and latency
- Payload volume
"""

from prometheus_client import Counter, Histogram

# Inbound requests by response status: ok, bad_request, delivery_failed
relay_requests_total = Counter(
    "relay_requests_total",
    "Total number of segmentation requests handled",
    ["status"],
)

relay_payload_bytes = Counter(
    "relay_payload_bytes_total",
    "Total bytes of payload accepted for segmentation",
)

# Outbound deliveries by outcome: success, error
segments_delivered_total = Counter(
    "segments_delivered_total",
    "Total number of segment delivery attempts",
    ["status"],
)

segment_delivery_duration_seconds = Histogram(
    "segment_delivery_duration_seconds",
    "Time spent delivering a single segment to the destination",
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        30.0,
    ),  # From 5ms to 30s
)


def record_request(status: str, payload_bytes: int = 0) -> None:
    relay_requests_total.labels(status=status).inc()
    if payload_bytes:
        relay_payload_bytes.inc(payload_bytes)


def record_delivery(success: bool, duration: float) -> None:
    segments_delivered_total.labels(status="success" if success else "error").inc()
    segment_delivery_duration_seconds.observe(duration)
