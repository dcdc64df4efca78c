from __future__ import annotations


class TcpWatchError(Exception):
    """Base class for tcpwatch errors."""


class ConfigError(TcpWatchError):
    """Bad startup configuration; fatal before the tick loop starts."""


class SampleError(TcpWatchError):
    """A single sampling pass failed. The loop keeps running."""

    def __init__(self, msg: str, status: int | None = None):
        super().__init__(msg)
        self.status = status


class TableDecodeError(SampleError):
    pass
