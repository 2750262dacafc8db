"""Tests for the process entry point."""

import logging
from unittest.mock import patch

import pytest

from segment_relay.__main__ import main, parse_args


@pytest.fixture(autouse=True)
def cleanup_logging():
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()


class TestParseArgs:
    """Test command line parsing."""

    def test_defaults(self):
        args = parse_args([])

        assert args.log_level == "INFO"
        assert args.log_dir is None
        assert args.json_logs is False

    def test_all_options(self):
        args = parse_args(["--log-level", "DEBUG", "--log-dir", "/tmp/logs", "--json-logs"])

        assert args.log_level == "DEBUG"
        assert args.log_dir == "/tmp/logs"
        assert args.json_logs is True


class TestMain:
    """Test startup behavior."""

    def test_missing_configuration_exits_nonzero(self, monkeypatch):
        monkeypatch.delenv("SEGMENT_CHUNK_SIZE", raising=False)
        monkeypatch.delenv("SEGMENT_DESTINATION", raising=False)
        monkeypatch.delenv("LOG_DIR", raising=False)

        with patch("segment_relay.server.run") as mock_run:
            assert main([]) == 1

        mock_run.assert_not_called()

    def test_invalid_chunk_size_exits_nonzero(self, monkeypatch):
        monkeypatch.setenv("SEGMENT_CHUNK_SIZE", "0")
        monkeypatch.setenv("SEGMENT_DESTINATION", "localhost:8000")
        monkeypatch.delenv("LOG_DIR", raising=False)

        with patch("segment_relay.server.run") as mock_run:
            assert main([]) == 1

        mock_run.assert_not_called()

    def test_valid_configuration_runs_server(self, monkeypatch):
        monkeypatch.setenv("SEGMENT_CHUNK_SIZE", "120")
        monkeypatch.setenv("SEGMENT_DESTINATION", "localhost:8000")
        monkeypatch.delenv("LOG_DIR", raising=False)

        with patch("segment_relay.server.run") as mock_run:
            assert main([]) == 0

        config = mock_run.call_args[0][0]
        assert config.chunk_size == 120
        assert config.destination == "http://localhost:8000/"
