from __future__ import annotations
from typing import Iterable, Optional, Tuple

from ..collectors.table import state_name
from ..models import Conn, ConnectionSet, RawRow
from ..procs import ProcessNameResolver
from ..targets import TargetSpec, match_target
from ..utils.net import ipv4_from_dword, port_from_wire

UNSPECIFIED = "0.0.0.0"

def conn_key(conn: Conn) -> str:
    return f"{conn.laddr[0]}:{conn.laddr[1]} -> {conn.raddr[0]}:{conn.raddr[1]}"

def project_row(row: RawRow, name: str) -> Optional[Tuple[str, Conn]]:
    """Canonical (key, Conn) for a matched row, None for peerless sockets."""
    raddr = (ipv4_from_dword(row.remote_addr), port_from_wire(row.remote_port))
    if raddr[0] == UNSPECIFIED:
        return None
    conn = Conn(
        name=name, pid=row.pid,
        laddr=(ipv4_from_dword(row.local_addr), port_from_wire(row.local_port)),
        raddr=raddr,
        state=state_name(row.state),
    )
    return conn_key(conn), conn

def build_connection_set(rows: Iterable[RawRow], spec: TargetSpec, resolver: ProcessNameResolver) -> ConnectionSet:
    conns: ConnectionSet = {}
    for row in rows:
        name, ok = match_target(row.pid, spec, resolver)
        if not ok:
            continue
        projected = project_row(row, name)
        if projected is None:
            continue
        key, conn = projected
        conns[key] = conn
    return conns
