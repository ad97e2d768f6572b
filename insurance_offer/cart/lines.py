"""Live cart line snapshot, push-updated by the host."""
from collections.abc import Callable, Iterable

from insurance_offer.logging import get_logger
from insurance_offer.services.models import CartLine

logger = get_logger(__name__)

LinesListener = Callable[[tuple[CartLine, ...]], None]


class LiveCartLines:
    """
    Host-owned, read-only view of the shopper's cart lines.

    The host calls ``publish`` whenever the cart changes; readers always go
    through ``value`` and never keep their own copy.
    """

    def __init__(self, lines: Iterable[CartLine] = ()):
        self._value: tuple[CartLine, ...] = tuple(lines)
        self._listeners: list[LinesListener] = []

    @property
    def value(self) -> tuple[CartLine, ...]:
        """Latest published snapshot."""
        return self._value

    def publish(self, lines: Iterable[CartLine]) -> None:
        """Replace the snapshot and notify subscribers."""
        self._value = tuple(lines)
        logger.debug(f"Cart lines published: {len(self._value)} line(s)")
        for listener in list(self._listeners):
            try:
                listener(self._value)
            except Exception:
                logger.exception("Cart lines listener failed")

    def subscribe(self, listener: LinesListener) -> Callable[[], None]:
        """
        Register a listener for future pushes.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
