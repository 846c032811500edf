#!/usr/bin/env python3
"""
Hello World HTTP Server

Answers every request, whatever its method or path, with the same static
HTML page and logs the request headers.
"""
from http.server import ThreadingHTTPServer, BaseHTTPRequestHandler
from dataclasses import dataclass, field
import logging
import signal
import sys

from .errors import BindError


logger = logging.getLogger("hello_server")

HELLO_PAGE = (
    '<!doctype html><html><head><meta charset="utf-8" />'
    '<meta name="viewport" content="width=device-width, initial-scale=1.0" />'
    '<title>Hello World</title></head><body><h1>Hello, world!</h1></body></html>'
)
HELLO_BODY = HELLO_PAGE.encode("utf-8")

SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie", "set-cookie"})
MAX_LOGGED_VALUE = 256

DRAIN_CHUNK = 64 * 1024
MAX_DRAINED_BODY = 1024 * 1024

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"


@dataclass(frozen=True)
class ServerConfig:
    hostname: str = "localhost"
    port: int = 3000
    redact_headers: bool = False


@dataclass(frozen=True)
class Response:
    status: int
    headers: dict = field(default_factory=dict)
    body: bytes = b""


def handle_request(method, path, headers):
    """
    Build the response for a request.

    The arguments are accepted so the handler has the usual shape, but the
    result never depends on them.
    """
    return Response(
        status=200,
        headers={
            "Content-Type": "text/html",
            "Content-Length": str(len(HELLO_BODY)),
        },
        body=HELLO_BODY,
    )


def format_headers(headers, redact=False):
    """
    Turn a header message into the mapping that gets logged.

    Keys are lower-cased and repeated headers are joined with ", ".
    With *redact* set, credential headers are masked and very long
    values are truncated.
    """
    formatted = {}
    for name, value in headers.items():
        key = name.lower()
        if redact:
            if key in SENSITIVE_HEADERS:
                value = "[redacted]"
            elif len(value) > MAX_LOGGED_VALUE:
                value = value[:MAX_LOGGED_VALUE] + "..."
        if key in formatted:
            formatted[key] = f"{formatted[key]}, {value}"
        else:
            formatted[key] = value
    return formatted


class HelloHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"
    # idle keep-alive connections and stalled bodies are dropped after this
    timeout = 30
    redact_headers = False

    def __getattr__(self, name):
        # http.server dispatches on do_<METHOD>; accept any method name
        if name.startswith("do_"):
            return self._handle
        raise AttributeError(name)

    def _handle(self):
        logger.info("%s", format_headers(self.headers, redact=self.redact_headers))

        response = handle_request(self.command, self.path, self.headers)
        self.send_response(response.status)
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(response.body)
        self._discard_body()

    def _discard_body(self):
        """
        Consume the request body after the response has been sent.

        Small bodies are drained in chunks so the connection can be reused;
        anything larger, chunked or malformed closes the connection instead.
        """
        if "Transfer-Encoding" in self.headers:
            self.close_connection = True
            return
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            self.close_connection = True
            return
        if length > MAX_DRAINED_BODY:
            self.close_connection = True
            return
        try:
            while length > 0:
                chunk = self.rfile.read(min(length, DRAIN_CHUNK))
                if not chunk:
                    self.close_connection = True
                    return
                length -= len(chunk)
        except OSError:
            self.close_connection = True

    def log_message(self, format, *args):
        """Access log lines go to the debug level; headers are the INFO record."""
        logger.debug("%s - %s", self.address_string(), format % args)


class HelloHTTPServer(ThreadingHTTPServer):
    # a second instance on a busy port must fail instead of sharing it
    allow_reuse_port = False


class HelloServer:
    def __init__(self, config=None):
        self.config = config or ServerConfig()
        self.server = None
        self.serving = False

    @property
    def url(self):
        return f"http://{self.config.hostname}:{self.config.port}"

    def bind(self):
        """Bind the listening socket, raising BindError on failure."""
        host, port = self.config.hostname, self.config.port
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            raise BindError(host, port, f"port must be in 1..65535, got {port!r}")

        handler = type("ConfiguredHelloHandler", (HelloHandler,),
                       {"redact_headers": self.config.redact_headers})
        try:
            self.server = HelloHTTPServer((host, port), handler)
        except OSError as e:
            raise BindError(host, port, e.strerror or str(e)) from e

        logger.info("Server running at %s", self.url)
        return self.server

    def serve_forever(self):
        self.serving = True
        try:
            self.server.serve_forever()
        finally:
            self.serving = False

    def start(self):
        """Bind and serve until the process is stopped."""
        self.bind()
        try:
            self.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            self.server.server_close()

    def shutdown(self):
        """Stop serving if serve_forever() is running, then release the socket."""
        if self.server is None:
            return
        if self.serving:
            self.server.shutdown()
        self.server.server_close()


def configure_logging(level="INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)


def start(hostname="localhost", port=3000):
    if not logger.hasHandlers():
        configure_logging()
    HelloServer(ServerConfig(hostname=hostname, port=port)).start()


def _terminate(signum, frame):
    raise KeyboardInterrupt


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Hello World HTTP Server")
    parser.add_argument('--host', default='localhost', help='Host to bind to')
    parser.add_argument('--port', type=int, default=3000, help='Port to bind to')
    parser.add_argument(
        '--redact-headers',
        action='store_true',
        help='Mask credential headers and truncate long values in the log'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level'
    )

    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    config = ServerConfig(hostname=args.host, port=args.port,
                          redact_headers=args.redact_headers)
    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, _terminate)

    try:
        HelloServer(config).start()
    except BindError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
