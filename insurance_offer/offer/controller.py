"""
Cart Sync Controller

Keeps the offer toggle in step with the host cart. Membership is always
derived from the latest cart snapshot; the controller only owns the
single-slot ``processing`` flag around one mutation at a time.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from insurance_offer.errors import StorefrontError
from insurance_offer.host import CheckoutHost
from insurance_offer.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from insurance_offer.offer.notice import TransientNotice
from insurance_offer.services.models import (
    AddCartLine,
    CartLine,
    CartLineChange,
    CartLineChangeResult,
    CatalogProduct,
    RemoveCartLine,
)

logger = get_logger(__name__)


class OfferStatus(str, Enum):
    """Whether the offer variant is in the cart."""
    ABSENT = "absent"
    PRESENT = "present"


@dataclass(frozen=True)
class OfferState:
    """Offer membership derived from one cart snapshot."""

    status: OfferStatus
    line_id: str | None = None
    quantity: int = 0

    @property
    def is_present(self) -> bool:
        return self.status == OfferStatus.PRESENT


ABSENT = OfferState(OfferStatus.ABSENT)


def find_line(cart_lines: Iterable[CartLine], variant_id: str) -> CartLine | None:
    """First cart line carrying ``variant_id``, if any."""
    return next((line for line in cart_lines if line.merchandise_id == variant_id), None)


def derive_offer_state(offer_product: CatalogProduct | None, cart_lines: Iterable[CartLine]) -> OfferState:
    """
    Derive offer membership from a cart snapshot.

    Pure: no flags are read or written.

    Args:
        offer_product: Resolved offer product, or None if there is none
        cart_lines: Cart snapshot to scan

    Returns:
        ``present`` with the matching line's id and quantity, else ``absent``
    """
    if offer_product is None:
        return ABSENT
    line = find_line(cart_lines, offer_product.variant_id)
    if line is None:
        return ABSENT
    return OfferState(OfferStatus.PRESENT, line_id=line.id, quantity=line.quantity)


class CartSyncController:
    """
    Serializes offer add/remove mutations against the host cart.

    States: idle -> mutating -> idle. ``processing`` goes back to False once
    the mutation settles, whatever the outcome. Failures are handed to the
    notice; nothing is raised to the caller.
    """

    def __init__(
        self,
        host: CheckoutHost,
        notice: TransientNotice,
        on_change: Callable[[], None] | None = None,
    ):
        self.host = host
        self.notice = notice
        self.processing = False
        self._on_change = on_change

    def offer_state(self, offer_product: CatalogProduct | None) -> OfferState:
        """Offer state against the host's latest cart snapshot."""
        return derive_offer_state(offer_product, self.host.lines.value)

    async def activate(self, variant_id: str) -> CartLineChangeResult | None:
        """
        Add one unit of ``variant_id`` to the cart.

        Returns:
            Mutation result, or None if another mutation is in flight
        """
        return await self._mutate(AddCartLine(merchandise_id=variant_id, quantity=1))

    async def deactivate(self, variant_id: str) -> CartLineChangeResult | None:
        """
        Remove the cart line carrying ``variant_id``, full quantity.

        A no-op returning None when no such line exists or it holds no units.
        """
        line = find_line(self.host.lines.value, variant_id)
        if line is None or line.quantity < 1:
            logger.debug(f"No cart line for {sanitize_id_for_logging(variant_id)}, nothing to remove")
            return None
        return await self._mutate(RemoveCartLine(id=line.id, quantity=line.quantity))

    async def _mutate(self, change: CartLineChange) -> CartLineChangeResult | None:
        if self.processing:
            logger.warning(f"Ignoring {change.type.value}: a cart update is already in flight")
            return None

        self._set_processing(True)
        try:
            result = await self.host.apply_cart_lines_change(change)
        except StorefrontError as e:
            result = CartLineChangeResult.error(e.message)
        except Exception as e:
            logger.exception(f"Cart update {change.type.value} raised in host")
            result = CartLineChangeResult.error(str(e) or type(e).__name__)
        finally:
            self._set_processing(False)

        if result.is_error:
            logger.error(f"Cart update {change.type.value} failed: {sanitize_string_for_logging(result.message)}")
            self.notice.show()
        return result

    def _set_processing(self, value: bool) -> None:
        self.processing = value
        if self._on_change is not None:
            self._on_change()
