"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import AsyncMock

# Set test environment variables
os.environ.setdefault("SHOPIFY_SHOP_URL", "https://test-shop.myshopify.com")
os.environ.setdefault("SHOPIFY_STOREFRONT_TOKEN", "test_storefront_token")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from insurance_offer.cart import LiveCartLines
from insurance_offer.logging import configure_logging
from insurance_offer.services.currency import LocalizationService
from insurance_offer.services.models import CartLine, CartLineChangeResult

configure_logging()


OFFER_VARIANT_ID = "gid://shopify/ProductVariant/1001"


def product_node(handle, variant_id=None, price="4.99", image_url="https://cdn.test/insurance.png"):
    """Catalog query node as returned by the storefront."""
    return {
        "id": f"gid://shopify/Product/{handle}",
        "title": handle.replace("-", " ").title(),
        "handle": handle,
        "description": f"{handle} description",
        "images": {"nodes": [{"url": image_url}] if image_url else []},
        "variants": {
            "nodes": [
                {
                    "id": variant_id or f"gid://shopify/ProductVariant/{handle}",
                    "price": {"amount": price},
                }
            ]
        },
    }


class FakeHost:
    """In-memory checkout host"""

    def __init__(self, nodes=None, lines=()):
        self.lines = LiveCartLines(lines)
        self.i18n = LocalizationService(currency="USD", locale="en")
        self.query = AsyncMock(return_value={"products": {"nodes": nodes or []}})
        self.apply_cart_lines_change = AsyncMock(return_value=CartLineChangeResult.success())


@pytest.fixture
def offer_node():
    """The shipping insurance catalog node"""
    return product_node("shipping-insurance", variant_id=OFFER_VARIANT_ID, price="2.50")


@pytest.fixture
def catalog_nodes(offer_node):
    """Catalog page with the offer in the middle"""
    return [product_node("a"), offer_node, product_node("c")]


@pytest.fixture
def host(catalog_nodes):
    """Fake host with an empty cart"""
    return FakeHost(nodes=catalog_nodes)


@pytest.fixture
def offer_line():
    """Cart line holding the offer variant"""
    return CartLine(id="gid://shopify/CartLine/L1", merchandise_id=OFFER_VARIANT_ID, quantity=1)


@pytest.fixture
def other_line():
    """Unrelated cart line"""
    return CartLine(id="gid://shopify/CartLine/L9", merchandise_id="gid://shopify/ProductVariant/9", quantity=2)
