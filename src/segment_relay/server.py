"""
Segmentation relay HTTP server.

Accepts a text payload, splits it into fixed-size chunks and forwards
each chunk, in order, as a JSON segment to the configured destination.

Request flow:
    receive -> parse -> chunk -> send segment 0..n-1 -> 200
    Malformed body           -> 400, nothing sent
    First delivery failure   -> 500, remaining segments are not sent
"""

import logging
import uuid
from typing import AsyncIterator, List, Optional

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import ValidationError

from segment_relay.common.exceptions import DeliveryError, MalformedRequestError
from segment_relay.common.log_context import set_log_context
from segment_relay.common.logging import LoggedClass
from segment_relay.config import RelayConfig
from segment_relay.delivery.client import DeliveryClient
from segment_relay.metrics import record_request
from segment_relay.schemas.messages import InboundMessage, Segment
from segment_relay.segmentation.chunker import split_payload
from segment_relay.segmentation.envelope import build_segments

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def describe_validation_error(exc: ValidationError) -> str:
    """Condense a pydantic ValidationError into one line."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        problems.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(problems)


class SegmentRelay(LoggedClass):
    """
    Request handler holding the relay configuration and delivery client.

    Constructed once per application and shared by all inbound requests.
    Holds no per-request mutable state.
    """

    log_component = "handler"

    def __init__(self, config: RelayConfig, client: DeliveryClient):
        self.config = config
        self.client = client
        super().__init__()

    @staticmethod
    async def parse_message(request: web.Request) -> InboundMessage:
        """
        Read and validate the request body.

        Raises:
            MalformedRequestError: Body is not valid JSON or fails validation
        """
        body = await request.read()
        try:
            return InboundMessage.model_validate_json(body)
        except ValidationError as e:
            raise MalformedRequestError(
                f"Invalid request body: {describe_validation_error(e)}", cause=e
            ) from e

    def segment(self, message: InboundMessage) -> List[Segment]:
        """Chunk the message payload and wrap each chunk in a Segment."""
        chunks = split_payload(message.payload, self.config.chunk_size)
        return build_segments(chunks, message.time, encoding=self.config.data_encoding)

    async def forward(self, segments: List[Segment]) -> None:
        """
        Deliver segments one at a time, in order.

        Raises:
            DeliveryError: From the first failed delivery; later segments
                are never attempted
        """
        for segment in segments:
            await self.client.send(segment)

    async def segmentation(self, request: web.Request) -> web.Response:
        """Handle POST <route_path>."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_log_context(request_id=request_id, stage="receive")
        headers = {REQUEST_ID_HEADER: request_id}

        try:
            message = await self.parse_message(request)
            set_log_context(stage="chunk")
            segments = self.segment(message)
        except MalformedRequestError as e:
            record_request("bad_request")
            self._log(
                logging.WARNING,
                "Rejected malformed segmentation request",
                error_category=e.category.value,
                error_message=e.message,
            )
            return web.json_response({"error": e.message}, status=400, headers=headers)

        payload_bytes = len(message.payload)
        self._log(
            logging.INFO,
            "Segmenting payload",
            payload_bytes=payload_bytes,
            chunk_size=self.config.chunk_size,
            segment_count=len(segments),
        )

        set_log_context(stage="send")
        try:
            await self.forward(segments)
        except DeliveryError as e:
            record_request("delivery_failed", payload_bytes)
            self._log(
                logging.ERROR,
                "Segmentation request aborted on delivery failure",
                http_status=e.status_code,
                error_category=e.category.value,
                error_message=str(e),
                segment_count=len(segments),
            )
            return web.json_response(
                {"error": "segment delivery failed"}, status=500, headers=headers
            )

        record_request("ok", payload_bytes)
        self._log(
            logging.INFO,
            "Segmentation request completed",
            payload_bytes=payload_bytes,
            segment_count=len(segments),
        )
        return web.Response(status=200, headers=headers)

    async def health(self, request: web.Request) -> web.Response:
        """Handle GET /health."""
        return web.json_response(
            {
                "status": "ok",
                "destination": self.config.destination,
                "chunk_size": self.config.chunk_size,
                "route_path": self.config.route_path,
            }
        )


async def metrics_handler(request: web.Request) -> web.Response:
    """Handle GET /metrics with the Prometheus text exposition."""
    return web.Response(body=generate_latest(), headers={"Content-Type": CONTENT_TYPE_LATEST})


RELAY_KEY = web.AppKey("relay", SegmentRelay)


async def _delivery_client_ctx(app: web.Application) -> AsyncIterator[None]:
    """Open the delivery client on startup and close it on cleanup."""
    async with app[RELAY_KEY].client:
        yield


def create_app(
    config: RelayConfig,
    client: Optional[DeliveryClient] = None,
) -> web.Application:
    """
    Build the relay application.

    Args:
        config: Validated relay configuration
        client: Delivery client to use (default: one built from config)

    Returns:
        aiohttp Application with the segmentation, health and metrics routes
    """
    if client is None:
        client = DeliveryClient(
            config.destination,
            timeout_seconds=config.delivery_timeout_seconds,
            include_number=config.include_number,
        )

    relay = SegmentRelay(config, client)

    app = web.Application()
    app[RELAY_KEY] = relay
    app.router.add_post(config.route_path, relay.segmentation)
    app.router.add_get("/health", relay.health)
    app.router.add_get("/metrics", metrics_handler)
    app.cleanup_ctx.append(_delivery_client_ctx)
    return app


def run(config: RelayConfig) -> None:
    """Serve the relay until interrupted."""
    app = create_app(config)
    logger.info(
        f"Segmentation relay listening | "
        f"address={config.listen_host}:{config.listen_port} | "
        f"route={config.route_path} | "
        f"destination={config.destination} | "
        f"chunk_size={config.chunk_size}"
    )
    web.run_app(app, host=config.listen_host, port=config.listen_port, print=None)
