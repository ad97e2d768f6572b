"""Storefront-facing services: models, money, localization, API host."""
from .currency import LocalizationService
from .models import (
    AddCartLine,
    CartLine,
    CartLineChange,
    CartLineChangeResult,
    CartLineChangeResultType,
    CartLineChangeType,
    CatalogProduct,
    ProductVariant,
    RemoveCartLine,
)

__all__ = [
    "LocalizationService",
    "AddCartLine",
    "CartLine",
    "CartLineChange",
    "CartLineChangeResult",
    "CartLineChangeResultType",
    "CartLineChangeType",
    "CatalogProduct",
    "ProductVariant",
    "RemoveCartLine",
]
