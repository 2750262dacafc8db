"""Tests for segment envelope construction."""

import base64
from datetime import datetime, timezone

import pytest

from segment_relay.common.exceptions import ConfigurationError, MalformedRequestError
from segment_relay.segmentation.chunker import split_payload
from segment_relay.segmentation.envelope import BASE64, build_segments

TIMESTAMP = datetime(2024, 2, 28, 1, 1, 1, tzinfo=timezone.utc)


class TestBuildSegments:
    """Test build_segments() metadata and ordering."""

    def test_count_matches_number_of_chunks(self):
        segments = build_segments([b"12", b"34", b"56"], TIMESTAMP)

        assert len(segments) == 3
        assert all(s.count == 3 for s in segments)

    def test_numbers_start_at_zero_and_increase(self):
        segments = build_segments([b"AB", b"CD", b"EF", b"G"], TIMESTAMP)

        assert [s.number for s in segments] == [0, 1, 2, 3]

    def test_data_and_timestamp_preserved(self):
        segments = build_segments([b"ABCD", b"EFGH", b"IJ"], TIMESTAMP)

        assert [s.data for s in segments] == ["ABCD", "EFGH", "IJ"]
        assert all(s.time == TIMESTAMP for s in segments)

    def test_single_chunk(self):
        segments = build_segments([b"123"], TIMESTAMP)

        assert len(segments) == 1
        assert segments[0].number == 0
        assert segments[0].count == 1

    def test_no_chunks_no_segments(self):
        assert build_segments([], TIMESTAMP) == []

    def test_utf8_chunks_concatenate_to_original_text(self):
        text = "héllo wörld"
        chunks = split_payload(text.encode("utf-8"), 1000)

        segments = build_segments(chunks, TIMESTAMP)

        assert "".join(s.data for s in segments) == text


class TestDataEncoding:
    """Test utf-8 and base64 data encodings."""

    def test_split_multibyte_character_rejected_in_utf8_mode(self):
        # "é" is two bytes; a chunk size of 1 cuts it in half
        chunks = split_payload("é".encode("utf-8"), 1)

        with pytest.raises(MalformedRequestError, match="multi-byte"):
            build_segments(chunks, TIMESTAMP)

    def test_base64_encodes_each_chunk(self):
        chunks = split_payload("é!".encode("utf-8"), 1)

        segments = build_segments(chunks, TIMESTAMP, encoding=BASE64)

        decoded = b"".join(base64.b64decode(s.data) for s in segments)
        assert decoded == "é!".encode("utf-8")
        assert [s.number for s in segments] == [0, 1, 2]

    def test_unknown_encoding_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown data encoding"):
            build_segments([b"12"], TIMESTAMP, encoding="rot13")
