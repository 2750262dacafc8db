"""Wrap payload chunks in outbound Segment envelopes."""

import base64
from datetime import datetime
from typing import Callable, Dict, List, Sequence

from segment_relay.common.exceptions import ConfigurationError, MalformedRequestError
from segment_relay.schemas.messages import Segment

UTF8 = "utf-8"
BASE64 = "base64"


def _decode_utf8(chunk: bytes) -> str:
    return chunk.decode("utf-8")


def _encode_base64(chunk: bytes) -> str:
    return base64.b64encode(chunk).decode("ascii")


DATA_ENCODERS: Dict[str, Callable[[bytes], str]] = {
    UTF8: _decode_utf8,
    BASE64: _encode_base64,
}


def get_encoder(encoding: str) -> Callable[[bytes], str]:
    try:
        return DATA_ENCODERS[encoding]
    except KeyError:
        raise ConfigurationError(
            f"Unknown data encoding '{encoding}', expected one of {sorted(DATA_ENCODERS)}"
        ) from None


def build_segments(
    chunks: Sequence[bytes],
    timestamp: datetime,
    encoding: str = UTF8,
) -> List[Segment]:
    """
    Build one Segment per chunk, in order.

    Every segment carries the same timestamp and count (the number of
    chunks); number is the chunk's zero-based position.

    Args:
        chunks: Ordered payload chunks from split_payload()
        timestamp: Timestamp of the originating inbound message
        encoding: "utf-8" to send chunks as text, "base64" to send them encoded

    Returns:
        List of segments, empty if chunks is empty

    Raises:
        MalformedRequestError: A chunk is not valid UTF-8 in "utf-8" mode
            (the chunk size splits a multi-byte character)
        ConfigurationError: Unknown encoding
    """
    encode = get_encoder(encoding)
    count = len(chunks)

    segments = []
    for number, chunk in enumerate(chunks):
        try:
            data = encode(chunk)
        except UnicodeDecodeError as e:
            raise MalformedRequestError(
                f"Segment {number} of {count} splits a multi-byte character; "
                f"use base64 data encoding or a different chunk size",
                cause=e,
                context={"segment_number": number, "segment_count": count},
            ) from e
        segments.append(Segment(data=data, time=timestamp, number=number, count=count))

    return segments
