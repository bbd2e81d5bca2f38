from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, List


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


# Resolve installation dir (stackcalc package directory)
_STACKCALC_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_FILE = _STACKCALC_DIR / 'prelude' / 'std.calc'
_DEFAULT_LOG_LEVEL = 'WARNING'
_DEFAULT_REPL_HOST = '127.0.0.1'
_DEFAULT_REPL_PORT = 8765


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_prelude_files() -> List[Path]:
    """Prelude files in load order.

    STACKCALC_PRELUDE_PATH may name files or directories; a directory
    contributes every *.calc file inside it, sorted by name.
    """
    files: List[Path] = []
    for p in paths_from_env('STACKCALC_PRELUDE_PATH', [_DEFAULT_PRELUDE_FILE]):
        if p.is_dir():
            files.extend(sorted(p.glob('*.calc')))
        else:
            files.append(p)
    return files


def get_log_level() -> int:
    name = os.environ.get('STACKCALC_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get('STACKCALC_REPL_HOST', _DEFAULT_REPL_HOST)
    port = int(os.environ.get('STACKCALC_REPL_PORT', _DEFAULT_REPL_PORT))
    return host, port
