"""
Shared fixtures: scripted service manager CLI, recorded sleeps, local HTTP servers
"""

import socket

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from discovery.models import DiscoveryResult


def running(endpoint, port=None):
    return DiscoveryResult(endpoint=endpoint, port=port, is_running=True)


NOT_RUNNING = DiscoveryResult()


class FakeCLI:
    """Returns scripted status results in order; the last one repeats"""

    def __init__(self, statuses=None, start_ok=True):
        self.statuses = list(statuses or [NOT_RUNNING])
        self.start_ok = start_ok
        self.queries = 0
        self.starts = 0

    async def query_status(self):
        self.queries += 1
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    async def start_service(self):
        self.starts += 1
        return self.start_ok

    async def close(self):
        pass


class SleepRecorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


class FakeVerifier:
    def __init__(self, live=()):
        self.live = set(live)
        self.calls = []

    async def __call__(self, endpoint, timeout=None, models_path=None):
        self.calls.append(endpoint)
        return endpoint in self.live


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def unused_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
async def http_server():
    """Factory starting an aiohttp app on loopback; returns its base URL"""
    servers = []

    async def start(routes):
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        server = TestServer(app, host="127.0.0.1")
        await server.start_server()
        servers.append(server)
        return f"http://127.0.0.1:{server.port}"

    yield start

    for server in servers:
        await server.close()


def models_handler(models):
    async def handler(request):
        return web.json_response({"object": "list", "data": models})
    return handler
