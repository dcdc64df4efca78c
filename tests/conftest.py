"""Pytest fixtures and helpers for tcpwatch tests."""

from __future__ import annotations

import logging
from typing import Iterable

import pytest

from tcpwatch.collectors.table import encode_table
from tcpwatch.config import LOGGER_NAME, close_logging
from tcpwatch.models import Conn, RawRow
from tcpwatch.procs import ProcessNameResolver
from tcpwatch.utils.net import ipv4_to_dword, port_to_wire


def make_row(
    local: str = "10.0.0.5",
    lport: int = 50000,
    remote: str = "93.184.216.34",
    rport: int = 443,
    state: int = 5,
    pid: int = 100,
) -> RawRow:
    """Build a RawRow with its fields encoded the way the OS table stores them."""
    return RawRow(
        state=state,
        local_addr=ipv4_to_dword(local),
        local_port=port_to_wire(lport),
        remote_addr=ipv4_to_dword(remote),
        remote_port=port_to_wire(rport),
        pid=pid,
    )


def make_table(rows: Iterable[RawRow]) -> bytes:
    return encode_table(rows)


def make_conn(state: str = "ESTABLISHED", lport: int = 50000, name: str = "java.exe", pid: int = 100) -> Conn:
    return Conn(name=name, pid=pid, laddr=("10.0.0.5", lport), raddr=("93.184.216.34", 443), state=state)


class FakeLister:
    """Process lister over a fixed pid -> name table, counting scans."""

    def __init__(self, procs: dict[int, str] | None = None, fail: Exception | None = None) -> None:
        self.procs = procs or {}
        self.fail = fail
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.fail is not None:
            raise self.fail
        return list(self.procs.items())


@pytest.fixture
def lister() -> FakeLister:
    return FakeLister({100: "java.exe", 200: "chrome.exe", 300: "svchost.exe"})


@pytest.fixture
def resolver(lister: FakeLister) -> ProcessNameResolver:
    return ProcessNameResolver(lister)


@pytest.fixture
def output(caplog):
    """Capture what tcpwatch reports, one entry per log record."""
    close_logging()
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        yield caplog
    close_logging()
