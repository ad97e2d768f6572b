"""Transient error notice with a fixed auto-clear window."""
import asyncio
from collections.abc import Callable

from insurance_offer.config import OFFER_NOTICE_SECONDS
from insurance_offer.logging import get_logger

logger = get_logger(__name__)


class TransientNotice:
    """
    Owns the ``show_error`` flag.

    ``show()`` sets the flag and (re)starts the countdown; a repeat call
    replaces the pending timer rather than stacking a second one. Once
    ``close()`` has run, ``show()`` is ignored until ``reopen()``.
    """

    def __init__(
        self,
        duration: float = OFFER_NOTICE_SECONDS,
        on_change: Callable[[], None] | None = None,
    ):
        self.duration = duration
        self.show_error = False
        self._on_change = on_change
        self.closed = False
        self._timer: asyncio.TimerHandle | None = None

    def show(self) -> None:
        """Show the notice; must be called from the event loop thread."""
        if self.closed:
            logger.debug("Error notice closed, not showing")
            return
        loop = asyncio.get_running_loop()
        self._cancel_timer()
        self.show_error = True
        self._timer = loop.call_later(self.duration, self._expire)
        self._notify()

    def close(self) -> None:
        """Cancel the pending countdown and ignore later shows. The flag is left as is."""
        self.closed = True
        self._cancel_timer()

    def reopen(self) -> None:
        self.closed = False

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _expire(self) -> None:
        self._timer = None
        self.show_error = False
        logger.debug("Error notice expired")
        self._notify()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
