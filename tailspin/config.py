from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

log = logging.getLogger("Config")

# Defaults
DEFAULT_RECURSION_LIMIT = 10000
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_HISTORY_FILE = Path("~/.tailspin_history")
DEFAULT_REPL_HOST = "127.0.0.1"
DEFAULT_REPL_PORT = 5555


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        log.warning("Ignoring %s=%r: not an integer, using %d", var, raw, default)
        return default


def path_from_env(var: str, default: Path) -> Path:
    raw = os.environ.get(var)
    path = Path(raw.strip()) if raw and raw.strip() else default
    return path.expanduser()


def get_recursion_limit() -> int:
    return int_from_env("TAILSPIN_RECURSION_LIMIT", DEFAULT_RECURSION_LIMIT)


def get_log_level() -> str:
    level = os.environ.get("TAILSPIN_LOG_LEVEL", "").strip().upper()
    # getLevelName maps known level names to their number
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


def get_history_file() -> Optional[Path]:
    """REPL history location; TAILSPIN_HISTORY_FILE set to an empty value disables history."""
    if os.environ.get("TAILSPIN_HISTORY_FILE") == "":
        return None
    return path_from_env("TAILSPIN_HISTORY_FILE", DEFAULT_HISTORY_FILE)


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get("TAILSPIN_REPL_HOST") or DEFAULT_REPL_HOST
    return host, int_from_env("TAILSPIN_REPL_PORT", DEFAULT_REPL_PORT)
