"""
Segment delivery client.

Async HTTP client that POSTs segment envelopes to the downstream
destination. One request per segment, success strictly means HTTP 200,
and failures are raised immediately without retry.
"""

import asyncio
import logging
import time
from typing import Optional
from urllib.parse import urlsplit

import aiohttp

from segment_relay.common.exceptions import ConfigurationError, DeliveryError
from segment_relay.common.logging import LoggedClass
from segment_relay.metrics import record_delivery
from segment_relay.schemas.messages import Segment

JSON_HEADERS = {"Content-Type": "application/json"}

# Max characters of a failed response body kept for logging
RESPONSE_SNIPPET_CHARS = 200


def normalize_destination(destination: str) -> str:
    """
    Turn a configured destination into a full URL.

    Accepts either a full http(s) URL or a bare host:port, which is
    addressed as http://host:port/.

    Raises:
        ConfigurationError: If the destination is empty or not an http(s) URL
    """
    destination = (destination or "").strip()
    if not destination:
        raise ConfigurationError("Destination address is required")

    if "://" not in destination:
        destination = f"http://{destination}/"

    parts = urlsplit(destination)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(f"Invalid destination address: {destination}")
    return destination


def encode_segment(segment: Segment, include_number: bool = True) -> bytes:
    """Serialize a segment to compact JSON bytes.

    With include_number=False the ordinal is left out, giving the minimal
    {"data", "time", "count"} envelope.
    """
    exclude = None if include_number else {"number"}
    return segment.model_dump_json(exclude=exclude).encode("utf-8")


class DeliveryClient(LoggedClass):
    """
    Async client that delivers segments to a single destination.

    The underlying aiohttp session is shared by every inbound request;
    the client keeps no per-request state.

    Usage:
        async with DeliveryClient("http://localhost:8000/api/delivery/") as client:
            for segment in segments:
                await client.send(segment)

    Session management:
        By default the client creates (and closes) its own session.
        An existing session can be injected; the caller then owns it.
    """

    log_component = "delivery"

    def __init__(
        self,
        destination: str,
        timeout_seconds: float = 30,
        max_connections: int = 100,
        include_number: bool = True,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize DeliveryClient.

        Args:
            destination: host:port or full URL receiving segments
            timeout_seconds: Total timeout per POST
            max_connections: Connection pool size for an owned session
            include_number: Include the segment ordinal in the envelope
            session: Optional aiohttp session (None = create on first use)

        Raises:
            ConfigurationError: If destination or timeout is invalid
        """
        self.destination = normalize_destination(destination)
        if timeout_seconds <= 0:
            raise ConfigurationError(
                f"Delivery timeout must be positive, got {timeout_seconds}"
            )
        self.timeout_seconds = timeout_seconds
        self.max_connections = max_connections
        self.include_number = include_number

        self._session = session
        self._owns_session = session is None

        super().__init__()

    async def __aenter__(self) -> "DeliveryClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(limit=self.max_connections)
            self._session = aiohttp.ClientSession(connector=connector)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def send(self, segment: Segment) -> None:
        """
        Deliver one segment with a single POST.

        Args:
            segment: Envelope to deliver

        Raises:
            DeliveryError: On any status other than 200, or on a transport
                failure (connection refused, DNS failure, timeout)
        """
        session = await self._ensure_session()
        body = encode_segment(segment, include_number=self.include_number)
        started = time.perf_counter()

        try:
            async with session.post(
                self.destination,
                data=body,
                headers=JSON_HEADERS,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                status = response.status
                snippet = ""
                if status != 200:
                    raw = await response.read()
                    snippet = raw[:RESPONSE_SNIPPET_CHARS].decode("utf-8", errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            duration = time.perf_counter() - started
            record_delivery(False, duration)
            error = DeliveryError(
                f"Transport failure delivering segment {segment.number + 1}/{segment.count}",
                destination=self.destination,
                cause=e,
            )
            self._log_exception(
                error,
                "Segment delivery failed",
                level=logging.WARNING,
                segment_number=segment.number,
                segment_count=segment.count,
                duration_ms=round(duration * 1000, 2),
            )
            raise error from e

        duration = time.perf_counter() - started
        record_delivery(status == 200, duration)

        if status != 200:
            error = DeliveryError(
                f"Unexpected response status {status} for segment "
                f"{segment.number + 1}/{segment.count}: {snippet}",
                status_code=status,
                destination=self.destination,
            )
            self._log(
                logging.WARNING,
                "Segment rejected by destination",
                http_status=status,
                segment_number=segment.number,
                segment_count=segment.count,
                duration_ms=round(duration * 1000, 2),
                error_category=error.category.value,
            )
            raise error

        self._log(
            logging.DEBUG,
            "Segment delivered",
            http_status=status,
            segment_number=segment.number,
            segment_count=segment.count,
            duration_ms=round(duration * 1000, 2),
        )
