"""Checkout host contract.

The widget never talks to the network, renderer or locale directly; the
host supplies all of it through this interface.
"""
from decimal import Decimal
from typing import Any, Protocol, Union

from insurance_offer.cart import LiveCartLines
from insurance_offer.services.models import CartLineChange, CartLineChangeResult


class Localization(Protocol):
    """Host i18n service."""

    def format_currency(self, amount: Union[str, int, float, Decimal]) -> str: ...


class CheckoutHost(Protocol):
    """APIs the host runtime exposes to the widget."""

    lines: LiveCartLines
    i18n: Localization

    async def query(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a storefront GraphQL query and return its ``data`` object.

        Raises:
            StorefrontError: on transport or GraphQL failure
        """
        ...

    async def apply_cart_lines_change(self, change: CartLineChange) -> CartLineChangeResult:
        """Apply one cart mutation; rejection comes back as an error result."""
        ...
