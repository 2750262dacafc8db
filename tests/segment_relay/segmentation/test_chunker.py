"""Tests for fixed-size payload chunking."""

import pytest

from segment_relay.common.exceptions import ConfigurationError
from segment_relay.segmentation.chunker import split_payload, validate_chunk_size


class TestSplitPayload:
    """Test split_payload() slicing behavior."""

    @pytest.mark.parametrize(
        "data,chunk_size,expected",
        [
            (b"123456", 2, [b"12", b"34", b"56"]),
            (b"12345", 2, [b"12", b"34", b"5"]),
            (b"1", 2, [b"1"]),
            (b"123", 4, [b"123"]),
            (b"1234", 4, [b"1234"]),
            (b"ABCDEFGHIJ", 4, [b"ABCD", b"EFGH", b"IJ"]),
        ],
        ids=[
            "even split",
            "uneven split",
            "single character",
            "chunk size larger than input",
            "chunk size equal to input",
            "ten bytes by four",
        ],
    )
    def test_split(self, data, chunk_size, expected):
        assert split_payload(data, chunk_size) == expected

    def test_empty_input_yields_no_chunks(self):
        """Empty payload produces no chunks, not one empty chunk."""
        assert split_payload(b"", 2) == []

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 64])
    def test_chunks_reconstruct_payload(self, chunk_size):
        data = bytes(range(256)) * 3 + b"tail"

        chunks = split_payload(data, chunk_size)

        assert b"".join(chunks) == data
        assert all(len(c) == chunk_size for c in chunks[:-1])
        assert 1 <= len(chunks[-1]) <= chunk_size

    def test_chunk_size_one_splits_every_byte(self):
        assert split_payload(b"abc", 1) == [b"a", b"b", b"c"]

    def test_does_not_modify_input(self):
        data = b"payload"
        split_payload(data, 3)
        assert data == b"payload"


class TestChunkSizeValidation:
    """Invalid chunk sizes are rejected instead of looping or crashing."""

    @pytest.mark.parametrize("chunk_size", [0, -1, -120])
    def test_non_positive_rejected(self, chunk_size):
        with pytest.raises(ConfigurationError, match="positive"):
            split_payload(b"123", chunk_size)

    @pytest.mark.parametrize("chunk_size", [2.0, "2", None, True])
    def test_non_integer_rejected(self, chunk_size):
        with pytest.raises(ConfigurationError, match="integer"):
            validate_chunk_size(chunk_size)

    def test_rejected_even_for_empty_payload(self):
        with pytest.raises(ConfigurationError):
            split_payload(b"", 0)

    def test_valid_size_returned(self):
        assert validate_chunk_size(120) == 120
