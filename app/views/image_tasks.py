from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from PySide6.QtCore import QObject, Signal, Slot
from loguru import logger


class FutureRelay(QObject):
    """Delivers worker-thread results to callbacks on the GUI thread.

    The relay must be created on the GUI thread. Emitting `delivered` from a
    worker thread queues the call, so callbacks always run where widgets live.
    """

    delivered = Signal(object, object)  # callback, value

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.delivered.connect(self._dispatch)

    def deliver(self, future: Future[Any], callback: Callable[[Any], None]) -> None:
        """Call `callback(result)` on the GUI thread once `future` completes.

        Failed futures are logged and the callback receives None.
        """

        def _done(fut: Future[Any]) -> None:
            try:
                value = fut.result()
            except Exception as ex:  # pragma: no cover - GUI background task
                logger.error("Background task failed: {}", ex)
                value = None
            self.delivered.emit(callback, value)

        future.add_done_callback(_done)

    def wrap(self, callback: Callable[[Any], None]) -> Callable[[Any], None]:
        """Return a function that forwards its argument to `callback` on the GUI thread."""

        def _forward(value: Any) -> None:
            self.delivered.emit(callback, value)

        return _forward

    @Slot(object, object)
    def _dispatch(self, callback: Callable[[Any], None], value: Any) -> None:
        try:
            callback(value)
        except Exception as ex:  # pragma: no cover - best effort
            logger.exception("GUI callback failed: {}", ex)
