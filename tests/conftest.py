"""
pytest configuration for segment_relay tests.

Adds src directory to Python path for imports and provides shared fixtures:
a recording downstream destination and relay configuration pointing at it.
"""

import sys
from pathlib import Path
from typing import List

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from segment_relay.common.log_context import clear_log_context  # noqa: E402


class RecordingDestination:
    """
    Downstream stand-in that records every segment POSTed to it.

    fail_on maps a 1-based request number to the status returned for it;
    every other request gets 200.
    """

    def __init__(self):
        self.requests: List[dict] = []
        self.bodies: List[bytes] = []
        self.content_types: List[str] = []
        self.fail_on: dict = {}

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.read()
        self.bodies.append(body)
        self.content_types.append(request.headers.get("Content-Type", ""))
        self.requests.append(await request.json())
        status = self.fail_on.get(len(self.requests), 200)
        return web.Response(status=status, text="rejected" if status != 200 else "")

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/delivery/", self.handle)
        return app


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep request context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def destination() -> RecordingDestination:
    return RecordingDestination()


@pytest_asyncio.fixture
async def destination_server(destination):
    """Start the recording destination on an ephemeral port."""
    server = TestServer(destination.app())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def destination_url(destination_server) -> str:
    return str(destination_server.make_url("/api/delivery/"))
