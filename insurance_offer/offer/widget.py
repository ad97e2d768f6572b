"""Offer widget view model.

Wires the resolver, controller and notice together and produces the
checkbox rendering contract the host draws.
"""

from collections.abc import Callable
from dataclasses import dataclass

from insurance_offer.config import (
    OFFER_CATALOG_PAGE_SIZE,
    OFFER_NOTICE_SECONDS,
    OFFER_PLACEHOLDER_IMAGE_URL,
    OFFER_PRODUCT_HANDLE,
)
from insurance_offer.errors import ERROR_CART_UPDATE_FAILED
from insurance_offer.host import CheckoutHost
from insurance_offer.logging import get_logger
from insurance_offer.offer.catalog import CatalogResolver
from insurance_offer.offer.controller import CartSyncController, OfferState
from insurance_offer.offer.notice import TransientNotice
from insurance_offer.services.models import CartLineChangeResult, CatalogProduct

logger = get_logger(__name__)

LOADING_HEADING = "You might also like"
OFFER_HEADING = "Add Insurance to your order? Just {price} extra!"


@dataclass(frozen=True)
class LoadingView:
    """Skeleton shown while the catalog query is running."""

    heading: str = LOADING_HEADING
    disabled: bool = True


@dataclass(frozen=True)
class OfferView:
    """Everything the host needs to draw the offer."""

    heading: str
    title: str
    description: str | None
    image_url: str
    price: str
    variant_id: str
    checked: bool
    disabled: bool
    error_message: str | None = None


View = LoadingView | OfferView | None


class OfferWidget:
    """
    One mounted instance of the insurance offer.

    Lifecycle: ``mount()`` once, ``render()`` as often as the host likes,
    ``toggle()`` on checkbox changes, ``unmount()`` on teardown. When
    ``on_render`` is given it receives a fresh view after every state change
    and every cart push.
    """

    def __init__(
        self,
        host: CheckoutHost,
        target_handle: str = OFFER_PRODUCT_HANDLE,
        page_size: int = OFFER_CATALOG_PAGE_SIZE,
        notice_seconds: float = OFFER_NOTICE_SECONDS,
        placeholder_image_url: str = OFFER_PLACEHOLDER_IMAGE_URL,
        on_render: Callable[[View], None] | None = None,
    ):
        self.host = host
        self.placeholder_image_url = placeholder_image_url
        self.resolver = CatalogResolver(host, target_handle=target_handle, page_size=page_size)
        self.notice = TransientNotice(duration=notice_seconds, on_change=self._invalidate)
        self.controller = CartSyncController(host, self.notice, on_change=self._invalidate)
        self._on_render = on_render
        self._unsubscribe: Callable[[], None] | None = None
        self.mounted = False

    @property
    def offer_product(self) -> CatalogProduct | None:
        return self.resolver.offer_product

    @property
    def processing(self) -> bool:
        return self.controller.processing

    @property
    def show_error(self) -> bool:
        return self.notice.show_error

    async def mount(self) -> None:
        """Subscribe to cart pushes and resolve the offer product."""
        if self.mounted:
            return
        self.mounted = True
        self.notice.reopen()
        self._unsubscribe = self.host.lines.subscribe(lambda _lines: self._invalidate())

        self.resolver.loading = True
        self._invalidate()
        await self.resolver.resolve()
        self._invalidate()

    def unmount(self) -> None:
        """Tear down: stop the notice countdown and drop the cart subscription."""
        self.notice.close()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.mounted = False

    def offer_state(self) -> OfferState:
        return self.controller.offer_state(self.offer_product)

    def render(self) -> View:
        """Build the current view from the latest cart snapshot."""
        if self.resolver.loading:
            return LoadingView()

        product = self.offer_product
        if product is None:
            return None

        price = self.host.i18n.format_currency(product.variant.price)
        return OfferView(
            heading=OFFER_HEADING.format(price=price),
            title=product.title,
            description=product.description,
            image_url=product.image_url or self.placeholder_image_url,
            price=price,
            variant_id=product.variant_id,
            checked=self.offer_state().is_present,
            disabled=self.controller.processing,
            error_message=ERROR_CART_UPDATE_FAILED if self.notice.show_error else None,
        )

    async def toggle(self, checked: bool) -> CartLineChangeResult | None:
        """Checkbox change handler."""
        product = self.offer_product
        if product is None:
            return None
        if checked:
            return await self.controller.activate(product.variant_id)
        return await self.controller.deactivate(product.variant_id)

    def _invalidate(self) -> None:
        if self._on_render is None or not self.mounted:
            return
        try:
            self._on_render(self.render())
        except Exception:
            logger.exception("Offer render callback failed")
