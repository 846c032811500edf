"""Errors raised by the hello server."""


class BindError(OSError):
    """The listening socket could not be established."""

    def __init__(self, hostname, port, reason):
        self.hostname = hostname
        self.port = port
        self.reason = reason
        super().__init__(f"cannot bind {hostname}:{port}: {reason}")

    def __str__(self):
        return self.args[0]
