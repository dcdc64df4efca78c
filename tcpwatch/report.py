from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterable, Optional

from .config import LOGGER_NAME
from .models import Conn, ConnectionSet, ConnEvent, EventKind

log = logging.getLogger(f"{LOGGER_NAME}.report")

def _conn_line(key: str, conn: Conn) -> str:
    return f"{key} | Process: {conn.name:<15} (PID: {conn.pid:<5}) | State: {conn.state:<12}"

def format_event(ev: ConnEvent) -> str:
    c = ev.conn
    head = f"[{ev.kind.value}] {ev.key} | Process: {c.name} (PID: {c.pid})"
    if ev.kind is EventKind.CHANGED:
        return f"{head} | State: {ev.prev_state} -> {c.state}"
    if ev.kind is EventKind.CLOSED:
        return f"{head} | Last state: {c.state}"
    return f"{head} | State: {c.state}"

def report_snapshot(conns: ConnectionSet, now: Optional[datetime] = None) -> int:
    ts = (now or datetime.now()).strftime("%H:%M:%S")
    if not conns:
        log.info("--- %s no connections match the targets ---", ts)
        return 0
    lines = [f"--- {ts} matched connections ({len(conns)}) ---"]
    lines += [_conn_line(k, conns[k]) for k in sorted(conns)]
    lines.append("-" * 35)
    log.info("\n".join(lines))
    return len(conns)

def report_changes(events: Iterable[ConnEvent], now: Optional[datetime] = None) -> int:
    """Log one header plus a line per event; silent ticks log nothing."""
    events = list(events)
    if not events:
        return 0
    ts = (now or datetime.now()).strftime("%H:%M:%S.%f")[:-3]
    log.info("--- %s state changes ---", ts)
    for ev in events:
        log.info(format_event(ev))
    return len(events)

def report_error(exc: BaseException) -> None:
    log.error("error: failed to sample connections: %s", exc)
