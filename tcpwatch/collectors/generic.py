from __future__ import annotations
import logging

import psutil

from ..config import TCP_STATE
from ..models import RawRow
from ..utils.net import ipv4_to_dword, port_to_wire
from .table import HEADER, ROW, NeedBuffer, TableData, TableError, TableResult, encode_table

logger = logging.getLogger(__name__)

STATE_CODE = {name: code for code, name in TCP_STATE.items()}
# psutil spells a few states differently from the MIB table
STATE_CODE.update({"CLOSE": 1, "SYN_RECV": 4, "NONE": 1})

def _endpoint(addr) -> tuple[str, int]:
    if not addr:
        return "0.0.0.0", 0
    ip = addr.ip if hasattr(addr, 'ip') else addr[0]
    port = addr.port if hasattr(addr, 'port') else addr[1]
    return ip, port

def collect_rows() -> list[RawRow]:
    rows: list[RawRow] = []
    for c in psutil.net_connections(kind='tcp4'):
        lip, lport = _endpoint(c.laddr)
        rip, rport = _endpoint(c.raddr)
        rows.append(RawRow(
            state=STATE_CODE.get(str(getattr(c.status, "value", c.status)), 0),
            local_addr=ipv4_to_dword(lip), local_port=port_to_wire(lport),
            remote_addr=ipv4_to_dword(rip), remote_port=port_to_wire(rport),
            pid=c.pid or 0,
        ))
    return rows

class SnapshotProvider:
    """psutil backed stand-in for GetExtendedTcpTable on non-Windows hosts.

    The size probe scans once and keeps the rows; the follow-up call with a
    large enough buffer is served from them without a second scan.
    """

    def __init__(self):
        self._pending: list[RawRow] | None = None

    def __call__(self, bufsize: int) -> TableResult:
        rows, self._pending = self._pending, None
        if rows is None or bufsize == 0:
            try:
                rows = collect_rows()
            except psutil.AccessDenied as e:
                logger.debug("net_connections denied: %s", e)
                return TableError(5)  # ERROR_ACCESS_DENIED
        needed = HEADER.size + len(rows) * ROW.size
        if bufsize < needed:
            self._pending = rows
            return NeedBuffer(needed)
        return TableData(encode_table(rows))

provider = SnapshotProvider()
