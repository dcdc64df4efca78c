from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

import yaml

from .errors import ConfigError

if TYPE_CHECKING:
    from .procs import ProcessNameResolver

DEBUG_TARGET = "0"


@dataclass(frozen=True)
class TargetSpec:
    """Process names and/or decimal PIDs to monitor.

    A target equal to "0" puts the matcher in debug mode: every row
    matches, whatever else is listed. PID 0 itself cannot be targeted.
    """
    targets: Tuple[str, ...] = ()

    @property
    def debug(self) -> bool:
        return DEBUG_TARGET in self.targets

    @property
    def label(self) -> str:
        return "all processes" if self.debug else ", ".join(self.targets)

    def __bool__(self) -> bool:
        return bool(self.targets)


def _split(csv: str) -> list[str]:
    return [x.strip() for x in csv.split(",") if x.strip()]


def parse_targets(names: str = "", pids: str = "", extra: Iterable[str] = ()) -> TargetSpec:
    targets = _split(names) + _split(pids) + [str(x).strip() for x in extra if str(x).strip()]
    return TargetSpec(tuple(targets))


def load_targets(path: Optional[Path]) -> list[str]:
    """Read a target list from a YAML (.yaml/.yml) or JSON file.

    The document must be a list of process names and/or PIDs.
    """
    if not path:
        return []
    if not path.exists():
        raise ConfigError(f"targets file not found: {path}")
    try:
        txt = path.read_text(encoding="utf-8")
        data = yaml.safe_load(txt) if path.suffix in (".yaml", ".yml") else json.loads(txt)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read targets file {path}: {e}") from e
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(t, (str, int)) and not isinstance(t, bool) for t in data):
        raise ConfigError(f"targets file {path} must contain a list of process names or PIDs")
    return [str(t) for t in data]


def match_target(pid: int, spec: TargetSpec, resolver: ProcessNameResolver) -> tuple[str, bool]:
    if spec.debug:
        return resolver.resolve(pid), True
    if str(pid) in spec.targets:
        return resolver.resolve(pid), True
    name = resolver.resolve(pid)
    folded = name.casefold()
    for t in spec.targets:
        if t.casefold() == folded:
            return name, True
    return name, False
