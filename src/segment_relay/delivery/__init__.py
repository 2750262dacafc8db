"""Outbound delivery of segment envelopes."""

from segment_relay.delivery.client import DeliveryClient, encode_segment, normalize_destination

__all__ = ["DeliveryClient", "encode_segment", "normalize_destination"]
