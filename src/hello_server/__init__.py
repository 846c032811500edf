"""
Hello World HTTP Server

A single-page HTTP server that logs request headers and answers every
request with the same static document.
"""

from .errors import BindError
from .server import (
    HELLO_PAGE,
    HelloHandler,
    HelloServer,
    Response,
    ServerConfig,
    format_headers,
    handle_request,
    start,
)

__all__ = [
    'BindError',
    'HELLO_PAGE',
    'HelloHandler',
    'HelloServer',
    'Response',
    'ServerConfig',
    'format_headers',
    'handle_request',
    'start',
]
