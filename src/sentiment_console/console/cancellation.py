"""Cooperative cancellation for the request loop.

A ``CancellationToken`` is created by whoever starts the loop and passed in
explicitly.  It is set at most once and never reset.  The loop checks it
between iterations and races it against the in-flight translation.

Ctrl+C
------
While a translation is in flight, ``cancel_on_interrupt`` routes SIGINT to
``token.cancel`` through the event loop, so the loop can cancel the
translation task and stop cleanly.  Outside that window SIGINT keeps its
default behaviour and arrives as ``KeyboardInterrupt``, which the loop
also turns into a cancellation when it interrupts a blocking read.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class CancellationToken:
    """One-shot cancellation flag that can also be awaited."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: asyncio.Event | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Set the token.  Later calls are no-ops."""
        if self._cancelled:
            return
        self._cancelled = True
        logger.debug("CancellationToken: cancellation requested")
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        """Suspend until the token is set."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()


@contextmanager
def cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    """Route SIGINT to ``token.cancel`` for the duration of the block.

    Must be entered from inside a running event loop.  Where the platform
    does not support loop signal handlers (Windows, or a non-main thread)
    this is a no-op and Ctrl+C surfaces as ``KeyboardInterrupt`` instead.
    """
    loop = asyncio.get_running_loop()
    installed = False
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel)
        installed = True
    except (NotImplementedError, RuntimeError, ValueError):
        logger.debug("cancel_on_interrupt: loop signal handlers unavailable")

    try:
        yield
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)
