"""
Relay message schemas.

Schemas:
    messages.py - InboundMessage (request body) and Segment (outbound envelope)

Design Decisions:
    - Pydantic for validation and JSON serialization
    - One canonical outbound envelope: data, time (RFC 3339), number, count
    - Datetime fields serialized as RFC 3339 strings with 'Z' for UTC
"""

from segment_relay.schemas.messages import InboundMessage, Segment, format_timestamp

__all__ = ["InboundMessage", "Segment", "format_timestamp"]
