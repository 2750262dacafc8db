"""Payload chunking and envelope construction."""

from segment_relay.segmentation.chunker import split_payload, validate_chunk_size
from segment_relay.segmentation.envelope import BASE64, UTF8, build_segments

__all__ = [
    "split_payload",
    "validate_chunk_size",
    "build_segments",
    "UTF8",
    "BASE64",
]
