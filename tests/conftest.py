import asyncio
import json
import threading

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from scrobble_cli.api.client import ScrobblerAPIClient
from scrobble_cli.api.rate_limiter import AdaptiveRateLimiter
from tests.factories import API_KEY, SESSION_KEY, SHARED_SECRET, USER_AGENT


class FakeLastFm:
    """A stand-in for the Last.fm 2.0 endpoint that records every request."""

    def __init__(self):
        self.url = ""
        self.requests: list[dict[str, str]] = []
        self.headers: list[dict[str, str]] = []
        self._responses: list[tuple[int, str]] = []

    def respond(self, status: int, body) -> None:
        """Queues a response; dicts are sent as JSON, strings as-is."""
        text = json.dumps(body) if isinstance(body, dict) else body
        self._responses.append((status, text))

    async def handle(self, request: web.Request) -> web.Response:
        data = await request.post()
        params = {key: str(value) for key, value in data.items()}
        self.requests.append(params)
        self.headers.append(dict(request.headers))

        if self._responses:
            status, text = self._responses.pop(0)
        elif params.get("method") == "track.scrobble":
            count = sum(1 for key in params if key.startswith("artist["))
            status = 200
            text = json.dumps({"scrobbles": {"@attr": {"accepted": count, "ignored": 0}}})
        else:
            status = 200
            text = json.dumps({"session": {"name": "user", "key": SESSION_KEY}})

        return web.Response(status=status, text=text, content_type="application/json")


@pytest.fixture
async def lastfm():
    fake = FakeLastFm()
    app = web.Application()
    app.router.add_post("/2.0/", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.url = str(server.make_url("/2.0/"))
    yield fake
    await server.close()


@pytest.fixture
def rate_limiter():
    return AdaptiveRateLimiter(initial_calls_per_second=1000, max_calls_per_second=1000)


@pytest.fixture
async def api_client(lastfm, rate_limiter):
    client = ScrobblerAPIClient(
        API_KEY, SHARED_SECRET, USER_AGENT, base_url=lastfm.url, rate_limiter=rate_limiter
    )
    yield client
    await client.close()


@pytest.fixture
def threaded_lastfm():
    """A `FakeLastFm` served from its own thread, for code that calls `asyncio.run`."""
    fake = FakeLastFm()
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()

    async def start() -> TestServer:
        app = web.Application()
        app.router.add_post("/2.0/", fake.handle)
        server = TestServer(app)
        await server.start_server()
        return server

    server = asyncio.run_coroutine_threadsafe(start(), loop).result(timeout=10)
    fake.url = str(server.make_url("/2.0/"))
    yield fake

    asyncio.run_coroutine_threadsafe(server.close(), loop).result(timeout=10)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=10)
    loop.close()
