"""Idempotent cancellation flag for in-flight streams."""

from collections.abc import Callable


class CancellationToken:
    """A one-shot cancellation flag with callbacks.

    Both ends of a stream check ``cancelled`` between pull steps. Callbacks
    registered with ``on_cancel`` run exactly once, on the first ``cancel()``;
    registering after cancellation runs the callback immediately.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], object]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def on_cancel(self, callback: Callable[[], object]) -> None:
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def cancel(self) -> bool:
        """Cancel the token.

        Returns:
            True on the first call, False if already cancelled.
        """
        if self._cancelled:
            return False
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        return True
