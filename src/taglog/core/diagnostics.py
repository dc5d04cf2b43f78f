"""Internal diagnostics for taglog.

A logging library cannot report its own failures through itself, so
non-fatal internal errors (appender write failures, worker errors, message
format errors, events dropped while paused) are emitted as single JSON lines
on stderr. Emission is off unless ``TAGLOG_CORE__INTERNAL_LOGGING_ENABLED`` is
set, and is rate limited per ``_rate_limit_key``.

Diagnostics never raise.
"""

from __future__ import annotations

import json
import sys
import threading
import time
from typing import Any, Callable

# Minimum seconds between two diagnostics sharing a rate-limit key
RATE_LIMIT_INTERVAL_SECONDS = 5.0
# Expired keys are pruned once the table reaches this size
MAX_RATE_LIMIT_KEYS = 256

Writer = Callable[[dict[str, Any]], None]

# Cached on first access; tests reset it between cases
_internal_logging_enabled: bool | None = None
_last_emitted: dict[str, float] = {}
_clock = time.monotonic
_lock = threading.Lock()


def _stderr_writer(payload: dict[str, Any]) -> None:
    line = json.dumps(payload, separators=(",", ":"), default=str)
    sys.stderr.write(line + "\n")
    sys.stderr.flush()


_writer: Writer = _stderr_writer


def is_enabled() -> bool:
    global _internal_logging_enabled
    if _internal_logging_enabled is None:
        try:
            from .settings import Settings

            _internal_logging_enabled = bool(
                Settings().core.internal_logging_enabled
            )
        except Exception:
            _internal_logging_enabled = False
    return _internal_logging_enabled


def _rate_limited(key: str | None) -> bool:
    if key is None:
        return False
    now = _clock()
    with _lock:
        last = _last_emitted.get(key)
        if last is not None and now - last < RATE_LIMIT_INTERVAL_SECONDS:
            return True
        if len(_last_emitted) >= MAX_RATE_LIMIT_KEYS:
            _prune_expired(now)
        _last_emitted[key] = now
    return False


def _prune_expired(now: float) -> None:
    expired = [
        k
        for k, last in _last_emitted.items()
        if now - last >= RATE_LIMIT_INTERVAL_SECONDS
    ]
    for k in expired:
        del _last_emitted[k]


def _emit(
    level: str,
    component: str,
    message: str,
    rate_limit_key: str | None,
    fields: dict[str, Any],
) -> None:
    if not is_enabled() or _rate_limited(rate_limit_key):
        return
    payload: dict[str, Any] = {
        "timestamp": time.time(),
        "level": level,
        "logger": "taglog",
        "component": component,
        "message": message,
    }
    payload.update(fields)
    try:
        _writer(payload)
    except Exception:
        pass


def warn(
    component: str,
    message: str,
    *,
    _rate_limit_key: str | None = None,
    **fields: Any,
) -> None:
    """Emit a WARN diagnostic for ``component``."""
    _emit("WARN", component, message, _rate_limit_key, fields)


def set_writer_for_tests(writer: Writer) -> None:
    global _writer
    _writer = writer


def _reset_for_tests() -> None:
    global _internal_logging_enabled, _writer
    _internal_logging_enabled = None
    _writer = _stderr_writer
    with _lock:
        _last_emitted.clear()
