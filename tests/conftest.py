"""Shared fixtures: a hello server running on a background thread."""
import socket
import threading
import time

import pytest

from hello_server import HelloServer, ServerConfig


def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class RunningServer:
    """HelloServer serving on a daemon thread."""

    def __init__(self, config):
        self.server = HelloServer(config)
        self.thread = None

    @property
    def port(self):
        return self.server.config.port

    @property
    def url(self):
        return f"http://127.0.0.1:{self.port}"

    def start(self):
        self.server.bind()
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()
        while not self.server.serving:
            time.sleep(0.01)
        return self

    def stop(self):
        self.server.shutdown()
        self.thread.join(timeout=5)


@pytest.fixture
def server_factory():
    started = []

    def factory(**kwargs):
        kwargs.setdefault("hostname", "localhost")
        kwargs.setdefault("port", free_port())
        running = RunningServer(ServerConfig(**kwargs)).start()
        started.append(running)
        return running

    yield factory
    for running in started:
        running.stop()


@pytest.fixture
def running_server(server_factory):
    return server_factory()


@pytest.fixture
def unused_port():
    return free_port()
