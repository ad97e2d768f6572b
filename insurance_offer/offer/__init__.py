"""Insurance offer: catalog resolver, cart sync controller, notice, widget."""
from .catalog import PRODUCTS_QUERY, CatalogResolver
from .controller import (
    ABSENT,
    CartSyncController,
    OfferState,
    OfferStatus,
    derive_offer_state,
    find_line,
)
from .notice import TransientNotice
from .widget import LoadingView, OfferView, OfferWidget, View

__all__ = [
    "PRODUCTS_QUERY",
    "CatalogResolver",
    "ABSENT",
    "CartSyncController",
    "OfferState",
    "OfferStatus",
    "derive_offer_state",
    "find_line",
    "TransientNotice",
    "LoadingView",
    "OfferView",
    "OfferWidget",
    "View",
]
