from __future__ import annotations
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ConfigError
from .targets import DEBUG_TARGET  # noqa: F401
from .targets import TargetSpec, load_targets, parse_targets
from .utils.path import to_abs_path

MODES = ("monitor", "snapshot")
DEFAULT_INTERVAL_MS = 1000
NA = "N/A"
LOGGER_NAME = "tcpwatch"

TCP_STATE = {
    1: "CLOSED", 2: "LISTEN", 3: "SYN_SENT", 4: "SYN_RECV", 5: "ESTABLISHED",
    6: "FIN_WAIT1", 7: "FIN_WAIT2", 8: "CLOSE_WAIT", 9: "CLOSING", 10: "LAST_ACK",
    11: "TIME_WAIT", 12: "DELETE_TCB",
}
UNKNOWN_STATE = "UNKNOWN"

@dataclass
class CFG:
    mode: str = "monitor"
    targets: TargetSpec = field(default_factory=TargetSpec)
    interval_ms: int = DEFAULT_INTERVAL_MS
    output_file: Optional[Path] = None
    count: int = 0

    @property
    def interval(self) -> float:
        return self.interval_ms / 1000.0

def init_cfg_from_args(args) -> CFG:
    cfg = CFG()
    cfg.mode = args.mode
    extra: list[str] = []
    if getattr(args, "targets_file", None):
        extra = load_targets(to_abs_path(args.targets_file))
    cfg.targets = parse_targets(args.names or "", args.pids or "", extra)
    if not cfg.targets:
        raise ConfigError("either -n or -p must be given")
    if args.interval <= 0:
        raise ConfigError(f"interval must be a positive number of milliseconds, got {args.interval}")
    cfg.interval_ms = int(args.interval)
    if getattr(args, "count", 0) < 0:
        raise ConfigError(f"count must not be negative, got {args.count}")
    cfg.count = int(getattr(args, "count", 0))
    cfg.output_file = to_abs_path(getattr(args, "output", None))
    return cfg

def setup_logging(output_file: Optional[Path] = None) -> logging.Logger:
    """Route tcpwatch output to stdout, tee'd into output_file when given."""
    log = logging.getLogger(LOGGER_NAME)
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if output_file is not None:
        try:
            handlers.append(logging.FileHandler(output_file, mode="a", encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"cannot open output file {output_file}: {e}") from e
    fmt = logging.Formatter("%(message)s")
    for h in handlers:
        h.setFormatter(fmt)
        log.addHandler(h)
    log.setLevel(logging.INFO)
    log.propagate = False
    return log

def close_logging() -> None:
    log = logging.getLogger(LOGGER_NAME)
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()
    log.propagate = True
