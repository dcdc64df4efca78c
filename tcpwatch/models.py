from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

@dataclass(frozen=True)
class RawRow:
    """One MIB_TCPROW_OWNER_PID record, fields as they sit on the wire."""
    state: int
    local_addr: int
    local_port: int
    remote_addr: int
    remote_port: int
    pid: int

@dataclass(frozen=True)
class Conn:
    name: str
    pid: int
    laddr: Tuple[str, int]
    raddr: Tuple[str, int]
    state: str  # 'ESTABLISHED', 'TIME_WAIT', ...

# "<laddr>:<lport> -> <raddr>:<rport>" -> Conn
ConnectionSet = Dict[str, Conn]

class EventKind(Enum):
    NEW = "NEW"
    CHANGED = "CHANGE"
    CLOSED = "CLOSED"

@dataclass(frozen=True)
class ConnEvent:
    kind: EventKind
    key: str
    conn: Conn
    prev_state: Optional[str] = None
