"""Segmentation relay configuration from environment variables."""

import os
from dataclasses import dataclass
from typing import Tuple

from segment_relay.common.exceptions import ConfigurationError
from segment_relay.delivery.client import normalize_destination
from segment_relay.segmentation.chunker import validate_chunk_size
from segment_relay.segmentation.envelope import DATA_ENCODERS, UTF8

DEFAULT_LISTEN_ADDRESS = "0.0.0.0:8080"
DEFAULT_ROUTE_PATH = "/split"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    Split host:port into its parts.

    An empty host (":8080") means all interfaces.

    Raises:
        ConfigurationError: If the port is missing or out of range
    """
    host, sep, port_str = address.strip().rpartition(":")
    if not sep:
        raise ConfigurationError(
            f"Listen address must be host:port, got '{address}'"
        )
    try:
        port = int(port_str)
    except ValueError:
        raise ConfigurationError(f"Invalid listen port in '{address}'") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"Listen port out of range in '{address}'")
    host = host.strip("[]") or "0.0.0.0"
    return host, port


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'") from None


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{value}'") from None


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got '{value}'")


@dataclass
class RelayConfig:
    """Relay configuration.

    Load from environment using RelayConfig.from_env(). Values are
    validated on construction, so an invalid config never exists.
    """

    # Segmentation
    chunk_size: int
    destination: str

    # Inbound HTTP
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    route_path: str = DEFAULT_ROUTE_PATH

    # Outbound envelope
    data_encoding: str = UTF8
    include_number: bool = True

    # Outbound HTTP
    delivery_timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check every field.

        Raises:
            ConfigurationError: On the first invalid field
        """
        validate_chunk_size(self.chunk_size)
        self.destination = normalize_destination(self.destination)
        parse_listen_address(self.listen_address)
        if not self.route_path.startswith("/"):
            raise ConfigurationError(
                f"Route path must start with '/', got '{self.route_path}'"
            )
        if self.data_encoding not in DATA_ENCODERS:
            raise ConfigurationError(
                f"Unknown data encoding '{self.data_encoding}', "
                f"expected one of {sorted(DATA_ENCODERS)}"
            )
        if self.delivery_timeout_seconds <= 0:
            raise ConfigurationError(
                f"Delivery timeout must be positive, got {self.delivery_timeout_seconds}"
            )

    @property
    def listen_host(self) -> str:
        return parse_listen_address(self.listen_address)[0]

    @property
    def listen_port(self) -> int:
        return parse_listen_address(self.listen_address)[1]

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Load configuration from environment variables.

        Required environment variables:
            SEGMENT_CHUNK_SIZE: Positive integer, bytes per segment
            SEGMENT_DESTINATION: host:port or full URL receiving segments

        Optional environment variables (with defaults):
            SEGMENT_LISTEN_ADDRESS: 0.0.0.0:8080 (default)
            SEGMENT_ROUTE_PATH: /split (default)
            SEGMENT_DATA_ENCODING: utf-8 (default) or base64
            SEGMENT_INCLUDE_NUMBER: true (default)
            DELIVERY_TIMEOUT_SECONDS: 30 (default)

        Raises:
            ConfigurationError: If required variables are missing or invalid
        """
        chunk_size_str = os.getenv("SEGMENT_CHUNK_SIZE")
        if not chunk_size_str:
            raise ConfigurationError(
                "SEGMENT_CHUNK_SIZE environment variable is required"
            )

        destination = os.getenv("SEGMENT_DESTINATION")
        if not destination:
            raise ConfigurationError(
                "SEGMENT_DESTINATION environment variable is required"
            )

        return cls(
            chunk_size=_parse_int("SEGMENT_CHUNK_SIZE", chunk_size_str),
            destination=destination,
            listen_address=os.getenv("SEGMENT_LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS),
            route_path=os.getenv("SEGMENT_ROUTE_PATH", DEFAULT_ROUTE_PATH),
            data_encoding=os.getenv("SEGMENT_DATA_ENCODING", UTF8).strip().lower(),
            include_number=_parse_bool(
                "SEGMENT_INCLUDE_NUMBER", os.getenv("SEGMENT_INCLUDE_NUMBER", "true")
            ),
            delivery_timeout_seconds=_parse_float(
                "DELIVERY_TIMEOUT_SECONDS", os.getenv("DELIVERY_TIMEOUT_SECONDS", "30")
            ),
        )
