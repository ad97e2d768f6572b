"""
Error constants and exception types.

Message strings are centralized here to avoid duplication across the
resolver, controller and host adapters.
"""

from typing import Any

# Shopper-facing
ERROR_CART_UPDATE_FAILED = "There was an issue updating your cart. Please try again."

# Storefront
ERROR_STOREFRONT_UNREACHABLE = "Storefront API unreachable"
ERROR_STOREFRONT_HTTP = "Storefront API returned HTTP {status}"
ERROR_GRAPHQL = "Storefront API returned errors: {messages}"
ERROR_NO_CART = "No cart to update"
ERROR_UNKNOWN_CHANGE = "Unsupported cart line change: {type}"

# Catalog
ERROR_PRODUCTS_MISSING = "Catalog response has no products"


class StorefrontError(Exception):
    """Error talking to the storefront API."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status: int | None = None,
        raw_error: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.raw_error = raw_error


class CatalogQueryError(StorefrontError):
    """Catalog query failed or returned an unusable payload."""

    def __init__(self, message: str = ERROR_PRODUCTS_MISSING, raw_error: Any = None) -> None:
        super().__init__(message, code="CATALOG_QUERY", raw_error=raw_error)


class CartMutationError(StorefrontError):
    """Cart mutation rejected by the storefront."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message, code=code or "CART_MUTATION")
