from __future__ import annotations
import argparse, sys
from typing import Optional, Sequence

from .collectors.loop import Monitor
from .config import DEFAULT_INTERVAL_MS, MODES, close_logging, init_cfg_from_args, setup_logging
from .errors import ConfigError

USAGE = """\
usage: tcpwatch <command> [options]

commands:
  monitor    report connection changes (new, state changed, closed)
  snapshot   list every matched connection on each interval

run '<command> -h' for the options of each command.
example: tcpwatch monitor -n java.exe -i 200
"""

def _common(ap: argparse.ArgumentParser) -> None:
    ap.add_argument('-n', dest='names', type=str, default='', help='process names to watch (comma-separated)')
    ap.add_argument('-p', dest='pids', type=str, default='', help="PIDs to watch (comma-separated, '0' watches everything)")
    ap.add_argument('-o', dest='output', type=str, default=None, help='also append output to this file')
    ap.add_argument('-i', dest='interval', type=int, default=DEFAULT_INTERVAL_MS, help='interval in milliseconds')
    ap.add_argument('-f', '--targets-file', type=str, default=None, help='YAML/JSON list of extra process names or PIDs')
    ap.add_argument('-c', '--count', type=int, default=0, help='stop after this many ticks (0 = until interrupted)')

def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog='tcpwatch', description='per-process IPv4 TCP connection watcher')
    sub = ap.add_subparsers(dest='mode', required=True)
    _common(sub.add_parser('monitor', help='report connection changes'))
    _common(sub.add_parser('snapshot', help='list matched connections every interval'))
    return ap.parse_args(argv)

def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] in ("-h", "--help"):
        sys.stdout.write(USAGE)
        return 0
    if not argv or argv[0] not in MODES:
        sys.stderr.write(USAGE)
        return 1
    args = parse_args(argv)
    try:
        cfg = init_cfg_from_args(args)
        log = setup_logging(cfg.output_file)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    log.info("--- %s mode started ---", cfg.mode)
    log.info("targets: %s", cfg.targets.label)
    log.info("interval: %d ms... (Ctrl+C to stop)", cfg.interval_ms)
    try:
        Monitor(cfg).run()
    except KeyboardInterrupt:
        log.info("--- stopped ---")
    finally:
        close_logging()
    return 0

if __name__ == '__main__':
    sys.exit(main())
