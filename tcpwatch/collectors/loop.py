from __future__ import annotations
import logging
import platform
import threading
import time
from datetime import datetime
from typing import Callable, Optional

from ..config import CFG
from ..errors import SampleError
from ..models import ConnectionSet
from ..procs import ProcessNameResolver
from ..report import report_changes, report_error, report_snapshot
from ..targets import TargetSpec
from ..tracking import build_connection_set, diff_connections
from .table import TableProvider, decode_table, fetch_table

logger = logging.getLogger(__name__)

def default_provider() -> TableProvider:
    if platform.system() == 'Windows':
        from .windows import provider
    else:
        from .generic import provider
    return provider

def sample(provider: TableProvider, spec: TargetSpec, resolver: ProcessNameResolver) -> ConnectionSet:
    buf = fetch_table(provider)
    return build_connection_set(decode_table(buf), spec, resolver)

def run_ticks(interval: float, on_tick: Callable[[datetime], None],
              stop: Optional[threading.Event] = None, max_ticks: int = 0) -> int:
    """Call on_tick once per interval until stopped.

    Deadlines sit on a fixed grid from the start time. A pass that overruns
    skips the deadlines it missed instead of queueing them.
    """
    stop = stop or threading.Event()
    start = time.monotonic()
    ticks = 0
    next_at = start + interval
    while not stop.is_set():
        if stop.wait(max(0.0, next_at - time.monotonic())):
            break
        on_tick(datetime.now())
        ticks += 1
        if max_ticks and ticks >= max_ticks:
            break
        now = time.monotonic()
        next_at += interval
        if next_at <= now:
            missed = int((now - next_at) // interval) + 1
            logger.debug("pass overran the interval, skipping %d tick(s)", missed)
            next_at += missed * interval
    return ticks

class Monitor:
    """Per-mode tick handler holding the previous ConnectionSet."""

    def __init__(self, cfg: CFG, provider: Optional[TableProvider] = None,
                 resolver: Optional[ProcessNameResolver] = None):
        self.cfg = cfg
        self.provider = provider or default_provider()
        self.resolver = resolver or ProcessNameResolver()
        self.prev: ConnectionSet = {}

    def tick(self, now: Optional[datetime] = None) -> None:
        try:
            current = sample(self.provider, self.cfg.targets, self.resolver)
        except SampleError as e:
            report_error(e)
            return
        except Exception:
            logger.exception("unexpected failure while sampling connections")
            return
        if self.cfg.mode == "snapshot":
            report_snapshot(current, now)
        else:
            report_changes(diff_connections(current, self.prev), now)
        self.prev = current

    def run(self, stop: Optional[threading.Event] = None) -> int:
        return run_ticks(self.cfg.interval, self.tick, stop=stop, max_ticks=self.cfg.count)
