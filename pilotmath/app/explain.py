from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enabled with `--explain`; prints one JSON line per milestone (problem
created, answer graded, session ended).
"""

import json
from typing import Any, Dict

_ENABLED = False


def enable(flag: bool = True) -> None:
    global _ENABLED
    _ENABLED = bool(flag)


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    # enums, dates and numpy scalars fall back to str()
    data = json.dumps(payload or {}, separators=(",", ":"), default=str)
    print(f"[EXPLAIN] {event} :: {data}")
