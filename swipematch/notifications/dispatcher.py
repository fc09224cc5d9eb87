from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable

from .config import DEFAULT_NOTIFICATION_CONFIG

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(
    max_workers=DEFAULT_NOTIFICATION_CONFIG.workers,
    thread_name_prefix="swipematch-bg",
)
_pending: set[Future] = set()
_pending_lock = threading.Lock()


def _run(fn: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
    try:
        return fn(*args, **kwargs)
    except Exception:
        logger.error("Background task failed", exc_info=True)
        raise


def _forget(future: Future) -> None:
    with _pending_lock:
        _pending.discard(future)


def dispatch(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
    """Run ``fn`` in the background. Failures are logged, never raised to the caller."""
    future = _executor.submit(_run, fn, args, kwargs)
    with _pending_lock:
        _pending.add(future)
    future.add_done_callback(_forget)
    return future


def drain(timeout: float | None = 10.0) -> None:
    """Block until every dispatched task has finished."""
    with _pending_lock:
        pending = list(_pending)
    if pending:
        wait(pending, timeout=timeout)
