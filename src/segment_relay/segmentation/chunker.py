"""Fixed-size payload chunking."""

from typing import List

from segment_relay.common.exceptions import ConfigurationError


def validate_chunk_size(chunk_size: int) -> int:
    """Return chunk_size if it is a positive integer, else raise ConfigurationError."""
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
        raise ConfigurationError(
            f"Chunk size must be an integer, got {type(chunk_size).__name__}"
        )
    if chunk_size <= 0:
        raise ConfigurationError(f"Chunk size must be positive, got {chunk_size}")
    return chunk_size


def split_payload(data: bytes, chunk_size: int) -> List[bytes]:
    """
    Split data into contiguous chunks of chunk_size bytes.

    Every chunk has exactly chunk_size bytes except the last, which holds
    the remainder. Empty data yields an empty list.

    Args:
        data: Payload bytes
        chunk_size: Maximum chunk length in bytes (must be positive)

    Returns:
        Ordered list of chunks whose concatenation equals data

    Raises:
        ConfigurationError: If chunk_size is not a positive integer

    Example:
        >>> split_payload(b"12345", 2)
        [b'12', b'34', b'5']
    """
    validate_chunk_size(chunk_size)
    return [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]
