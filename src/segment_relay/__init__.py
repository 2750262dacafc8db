"""
Segmentation relay.

Splits text payloads received over HTTP into fixed-size chunks and forwards
each chunk as a JSON segment to a downstream HTTP endpoint.

Modules:
    config.py        - RelayConfig loaded from environment variables
    server.py        - aiohttp application and request handler
    segmentation/    - Chunking and envelope construction
    delivery/        - Outbound HTTP delivery client
    schemas/         - Pydantic message models
    common/          - Errors and logging
    metrics.py       - Prometheus metrics
"""

__version__ = "0.1.0"
