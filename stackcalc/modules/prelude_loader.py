from __future__ import annotations
import logging
from pathlib import Path
from typing import Protocol

from stackcalc.config import get_prelude_files

logger = logging.getLogger(__name__)


class _HasLoad(Protocol):
    def load(self, code: str) -> None: ...


def load_file(itp: _HasLoad, path: Path) -> None:
    itp.load(path.read_text(encoding='utf-8'))
    logger.info("loaded %s", path)


# Prelude convenience loader (files from STACKCALC_PRELUDE_PATH, in order)

def load_prelude(itp: _HasLoad) -> None:
    files = get_prelude_files()
    missing = [p for p in files if not p.is_file()]
    if missing:
        raise FileNotFoundError(f"Cannot find prelude file(s): {', '.join(map(str, missing))}")
    for p in files:
        load_file(itp, p)
