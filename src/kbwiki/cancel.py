"""Cooperative cancellation for long-running walks and exports.

Operations that iterate over many pages accept an optional ``cancel`` token
and call :func:`check_canceled` between items, never in the middle of one.
A cancelled operation raises :class:`OperationCanceled`, which is kept apart
from :class:`~kbwiki.errors.WikiError` so callers can tell "the user stopped
this" from "the data is broken".
"""

from __future__ import annotations

import threading


class OperationCanceled(Exception):
    """Raised when an operation observes a cancelled token."""

    def __init__(self, operation: str = "operation") -> None:
        self.operation = operation
        super().__init__(f"{operation} canceled")


class CancelToken:
    """Thread-safe cancellation flag shared between a caller and an operation."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def canceled(self) -> bool:
        return self._event.is_set()


def check_canceled(cancel: CancelToken | None, operation: str = "operation") -> None:
    """Raise OperationCanceled if ``cancel`` has been triggered."""
    if cancel is not None and cancel.canceled:
        raise OperationCanceled(operation)
