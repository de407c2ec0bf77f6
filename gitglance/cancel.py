"""Cooperative cancellation token shared by a scheduler and its worker."""

from __future__ import annotations

import threading

from .errors import Canceled


class CancelToken:
    """Thread-safe flag polled by long-running walks and hashing loops."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def canceled(self) -> bool:
        return self._event.is_set()

    def raise_if_canceled(self) -> None:
        """Raise ``Canceled`` once ``cancel()`` has been called."""
        if self._event.is_set():
            raise Canceled("status computation canceled")


def check_canceled(token: CancelToken | None) -> None:
    """Poll an optional token; ``None`` means the work is not cancellable."""
    if token is not None:
        token.raise_if_canceled()


__all__ = ["CancelToken", "check_canceled"]
