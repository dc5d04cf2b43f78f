"""Graceful shutdown handling for taglog.

Registers an atexit handler that drains every started dispatcher so queued
events reach their appenders before the interpreter exits. Dispatchers are
tracked in a WeakSet to avoid keeping discarded instances alive.

The handler is best-effort: each drain is bounded by
``atexit_drain_timeout_seconds`` and failures never propagate.
"""

from __future__ import annotations

import atexit
import weakref
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .dispatcher import Dispatcher


_shutdown_in_progress: bool = False
_registered_dispatchers: weakref.WeakSet[Any] = weakref.WeakSet()


def _get_shutdown_settings() -> dict[str, Any]:
    """Get shutdown settings from Settings, with fallback defaults."""
    try:
        from .settings import Settings

        settings = Settings()
        return {
            "atexit_drain_enabled": settings.core.atexit_drain_enabled,
            "atexit_drain_timeout_seconds": settings.core.atexit_drain_timeout_seconds,
        }
    except Exception:  # pragma: no cover - defensive fallback
        return {
            "atexit_drain_enabled": True,
            "atexit_drain_timeout_seconds": 2.0,
        }


def register_dispatcher(dispatcher: Dispatcher) -> None:
    """Register a dispatcher for automatic drain at exit."""
    _registered_dispatchers.add(dispatcher)


def _atexit_handler() -> None:
    """Best-effort drain of all dispatchers on normal exit.

    Called by atexit; should never raise.
    """
    global _shutdown_in_progress

    if _shutdown_in_progress:
        return

    settings = _get_shutdown_settings()
    if not settings["atexit_drain_enabled"]:
        return

    _shutdown_in_progress = True
    timeout = settings["atexit_drain_timeout_seconds"]

    # Snapshot (WeakSet iteration can fail if GC runs)
    try:
        dispatchers = list(_registered_dispatchers)
    except Exception:  # pragma: no cover - rare GC race
        return

    for dispatcher in dispatchers:
        try:
            dispatcher.pause_logging(timeout=timeout)
        except Exception:
            pass  # Best effort - don't crash on exit


def _reset_for_tests() -> None:
    global _shutdown_in_progress
    _shutdown_in_progress = False
    _registered_dispatchers.clear()


atexit.register(_atexit_handler)
