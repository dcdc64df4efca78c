from __future__ import annotations
import logging
import threading
from typing import Callable, Dict, Iterable, Optional, Tuple

import psutil

from .config import NA

logger = logging.getLogger(__name__)

ProcessLister = Callable[[], Iterable[Tuple[int, str]]]

def psutil_lister() -> Iterable[Tuple[int, str]]:
    for p in psutil.process_iter(["pid", "name"]):
        yield p.info["pid"], p.info["name"] or ""

class ProcessNameResolver:
    """Memoized pid -> process name lookup.

    Misses scan the full process list once; the result, or "N/A" when the
    pid is gone or the listing fails, is cached for the life of the
    resolver. The lock only guards the cache, never the scan.
    """

    def __init__(self, lister: Optional[ProcessLister] = None):
        self.lister = lister or psutil_lister
        self.lock = threading.Lock()
        self._cache: Dict[int, str] = {}

    def resolve(self, pid: int) -> str:
        with self.lock:
            name = self._cache.get(pid)
        if name is not None:
            return name
        name = self._scan(pid)
        with self.lock:
            self._cache[pid] = name
        return name

    def _scan(self, pid: int) -> str:
        try:
            for p, name in self.lister():
                if p == pid:
                    return name or NA
        except (psutil.Error, OSError) as e:
            logger.debug("process listing failed while resolving pid %d: %s", pid, e)
        return NA

    def clear(self) -> None:
        with self.lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self.lock:
            return len(self._cache)

    def __contains__(self, pid: int) -> bool:
        with self.lock:
            return pid in self._cache
