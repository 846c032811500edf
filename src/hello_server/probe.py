#!/usr/bin/env python3
"""
Hello Server Probe

Sends requests to a running hello server and checks every response
against the fixed page contract.
"""
import argparse
import requests
import re
import time
import sys
from typing import List, Dict, Optional

from .server import HELLO_BODY


TOKEN = re.compile(r"[!#$%&'*+.^_`|~0-9A-Za-z-]+")


def http_method(value: str) -> str:
    """argparse type: an HTTP method must be a single token."""
    if not TOKEN.fullmatch(value):
        raise argparse.ArgumentTypeError(f"invalid HTTP method: {value!r}")
    return value.upper()


class Probe:
    def __init__(self, server_url: str, method: str = "GET",
                 interval_ms: int = 100, timeout_ms: int = 2000):
        """
        Initialize the probe.

        Args:
            server_url: Target server URL
            method: HTTP method to send
            interval_ms: Time between requests in milliseconds
            timeout_ms: Request timeout in milliseconds
        """
        self.server_url = server_url
        self.method = method.upper()
        self.interval_s = interval_ms / 1000.0
        self.timeout_s = timeout_ms / 1000.0
        self.results: List[Dict] = []

    def check(self, response) -> Optional[str]:
        """Return a description of how *response* deviates, or None."""
        if response.status_code != 200:
            return f"status {response.status_code}"
        content_type = response.headers.get("Content-Type")
        if content_type != "text/html":
            return f"content-type {content_type!r}"
        if self.method != "HEAD" and response.content != HELLO_BODY:
            return f"body mismatch ({len(response.content)} bytes)"
        return None

    def make_request(self, request_id: int) -> Dict:
        start_time = time.time()

        try:
            response = requests.request(
                self.method,
                self.server_url,
                timeout=self.timeout_s
            )
            latency_ms = (time.time() - start_time) * 1000
            problem = self.check(response)
            result = {
                "request_id": request_id,
                "latency_ms": latency_ms,
                "result": "ok" if problem is None else "mismatch",
                "status_code": response.status_code,
            }
            if problem:
                result["error"] = problem

        except requests.exceptions.Timeout:
            latency_ms = (time.time() - start_time) * 1000
            result = {
                "request_id": request_id,
                "latency_ms": latency_ms,
                "result": "timeout",
                "status_code": None,
            }

        except (requests.exceptions.RequestException, ValueError) as e:
            latency_ms = (time.time() - start_time) * 1000
            result = {
                "request_id": request_id,
                "latency_ms": latency_ms,
                "result": "error",
                "status_code": None,
                "error": str(e),
            }

        line = f"Request {request_id:4d}: {result['latency_ms']:7.2f} ms - {result['result'].upper()}"
        if "error" in result:
            line += f": {result['error']}"
        print(line, file=sys.stderr)
        return result

    def run(self, num_requests: int = 10) -> bool:
        """Send *num_requests* requests; True if every response matched."""
        print(f"Probing {self.server_url} with {self.method}", file=sys.stderr)

        for request_id in range(1, num_requests + 1):
            self.results.append(self.make_request(request_id))
            if request_id < num_requests:
                time.sleep(self.interval_s)

        self._print_summary()
        return self.ok

    @property
    def ok(self) -> bool:
        return bool(self.results) and all(r["result"] == "ok" for r in self.results)

    def _print_summary(self):
        if not self.results:
            return

        total = len(self.results)
        passed = len([r for r in self.results if r["result"] == "ok"])
        latencies = [r["latency_ms"] for r in self.results]

        print("\n=== Probe Summary ===", file=sys.stderr)
        print(f"Total requests:    {total}", file=sys.stderr)
        print(f"Matching:          {passed} ({passed/total*100:.1f}%)", file=sys.stderr)
        print(f"Latency min/avg/max: {min(latencies):.2f} / "
              f"{sum(latencies)/total:.2f} / {max(latencies):.2f} ms", file=sys.stderr)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Hello Server Probe")
    parser.add_argument(
        '--url',
        default='http://localhost:3000/',
        help='Target server URL'
    )
    parser.add_argument(
        '--requests',
        type=int,
        default=10,
        help='Number of requests to make'
    )
    parser.add_argument(
        '--method',
        type=http_method,
        default='GET',
        help='HTTP method to send'
    )
    parser.add_argument(
        '--interval',
        type=int,
        default=100,
        help='Interval between requests (milliseconds)'
    )
    parser.add_argument(
        '--timeout',
        type=int,
        default=2000,
        help='Request timeout (milliseconds)'
    )

    args = parser.parse_args(argv)

    probe = Probe(
        server_url=args.url,
        method=args.method,
        interval_ms=args.interval,
        timeout_ms=args.timeout
    )
    return 0 if probe.run(num_requests=args.requests) else 1


if __name__ == '__main__':
    sys.exit(main())
