from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

def to_abs_path(p: Optional[str | os.PathLike]) -> Optional[Path]:
    """Resolve a user supplied path (output file, targets file).

    '~' is expanded; relative paths are taken against the current directory.
    Empty values give None so callers can treat the option as unset.
    """
    if not p:
        return None
    pp = Path(p).expanduser()
    if pp.is_absolute():
        return pp.resolve()
    return (Path.cwd() / pp).resolve()
