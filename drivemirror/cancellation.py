"""Cooperative cancellation helpers for blocking remote calls."""

from __future__ import annotations

import threading
from concurrent.futures import Future, TimeoutError as FutureTimeout
from typing import Iterable, Optional, TypeVar

from .errors import Cancelled

T = TypeVar("T")

_POLL_INTERVAL = 0.05


def check_cancelled(cancel_event: Optional[threading.Event], *, stage: str | None = None) -> None:
    """Raise ``Cancelled`` when the caller has set the cancellation event."""
    if cancel_event is not None and cancel_event.is_set():
        raise Cancelled("Operation cancelled by caller", stage=stage)


def await_result(
    future: "Future[T]",
    cancel_event: Optional[threading.Event],
    *,
    stage: str | None = None,
) -> T:
    """Block on ``future`` while still honouring the cancellation event."""
    if cancel_event is None:
        return future.result()
    while True:
        check_cancelled(cancel_event, stage=stage)
        try:
            return future.result(timeout=_POLL_INTERVAL)
        except FutureTimeout:
            continue


def cancel_pending(futures: Iterable[Future]) -> None:
    for future in futures:
        future.cancel()


__all__ = ["await_result", "cancel_pending", "check_cancelled"]
