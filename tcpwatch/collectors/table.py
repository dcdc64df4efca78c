"""Binary MIB_TCPTABLE_OWNER_PID reader and the two-phase fetch loop.

Layout (little-endian DWORDs)::

    dwNumEntries
    { state, localAddr, localPort, remoteAddr, remotePort, owningPid } * n

Addresses keep the network byte order of the wire, ports sit byte-swapped
in the low 16 bits of their DWORD.
"""
from __future__ import annotations
import logging
import struct
from dataclasses import dataclass
from typing import Callable, Iterator, Union

from ..config import TCP_STATE, UNKNOWN_STATE
from ..errors import SampleError, TableDecodeError
from ..models import RawRow

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<I")
ROW = struct.Struct("<6I")
ERROR_INSUFFICIENT_BUFFER = 122
MAX_FETCH_ATTEMPTS = 5

@dataclass(frozen=True)
class TableData:
    buf: bytes

@dataclass(frozen=True)
class NeedBuffer:
    size: int

@dataclass(frozen=True)
class TableError:
    status: int

TableResult = Union[TableData, NeedBuffer, TableError]
TableProvider = Callable[[int], TableResult]

def state_name(code: int) -> str:
    return TCP_STATE.get(code, UNKNOWN_STATE)

def iter_rows(buf: bytes, count: int, offset: int = HEADER.size) -> Iterator[RawRow]:
    view = memoryview(buf)
    for i in range(count):
        pos = offset + i * ROW.size
        if pos + ROW.size > len(view):
            raise TableDecodeError(
                f"table truncated: row {i} of {count} needs {pos + ROW.size} bytes, buffer has {len(view)}")
        yield RawRow(*ROW.unpack_from(view, pos))

def decode_table(buf: bytes) -> Iterator[RawRow]:
    if len(buf) < HEADER.size:
        raise TableDecodeError(f"table header truncated: {len(buf)} bytes")
    (count,) = HEADER.unpack_from(buf, 0)
    return iter_rows(buf, count)

def encode_table(rows) -> bytes:
    rows = list(rows)
    return HEADER.pack(len(rows)) + b"".join(
        ROW.pack(r.state, r.local_addr, r.local_port, r.remote_addr, r.remote_port, r.pid) for r in rows)

def fetch_table(provider: TableProvider) -> bytes:
    """Drive the query-size-then-fetch protocol until data or a hard error.

    The table may grow between the probe and the fetch, so NeedBuffer is
    honoured a few times before giving up.
    """
    size = 0
    for _ in range(MAX_FETCH_ATTEMPTS):
        res = provider(size)
        if isinstance(res, TableData):
            return res.buf
        if isinstance(res, NeedBuffer):
            logger.debug("connection table needs %d bytes (offered %d)", res.size, size)
            size = res.size
            continue
        raise SampleError(f"GetExtendedTcpTable failed: {res.status}", status=res.status)
    raise SampleError(f"connection table kept growing after {MAX_FETCH_ATTEMPTS} attempts",
                      status=ERROR_INSUFFICIENT_BUFFER)
