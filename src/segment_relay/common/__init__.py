"""
Shared infrastructure for segment_relay.

Modules:
    exceptions.py   - Error taxonomy and HTTP status classification
    logging.py      - Structured logging helpers and LoggedClass mixin
    log_context.py  - Per-request log context (contextvars)
    log_setup.py    - Handler and formatter configuration
"""
