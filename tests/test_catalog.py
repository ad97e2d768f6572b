"""
Tests for the catalog resolver
"""

import logging

import httpx
import pytest
from unittest.mock import AsyncMock

from insurance_offer.errors import StorefrontError
from insurance_offer.offer.catalog import PRODUCTS_QUERY, CatalogResolver
from tests.conftest import OFFER_VARIANT_ID, FakeHost, product_node


class TestCatalogResolver:
    """Offer product selection."""

    @pytest.mark.asyncio
    async def test_selects_target_handle_only(self, host):
        """Handles a, shipping-insurance, c -> only the insurance record."""
        resolver = CatalogResolver(host)

        products = await resolver.resolve()

        assert [p.handle for p in products] == ["shipping-insurance"]
        assert resolver.offer_product.variant_id == OFFER_VARIANT_ID
        assert resolver.loading is False

    @pytest.mark.asyncio
    async def test_queries_one_bounded_page(self, host):
        await CatalogResolver(host).resolve()

        host.query.assert_awaited_once_with(PRODUCTS_QUERY, {"first": 20})

    @pytest.mark.asyncio
    async def test_custom_handle_and_page_size(self, host):
        resolver = CatalogResolver(host, target_handle="c", page_size=5)

        await resolver.resolve()

        host.query.assert_awaited_once_with(PRODUCTS_QUERY, {"first": 5})
        assert resolver.offer_product.handle == "c"

    @pytest.mark.asyncio
    async def test_handle_not_on_page(self):
        """Target missing from the fetched page -> no offer."""
        host = FakeHost(nodes=[product_node("a"), product_node("b")])
        resolver = CatalogResolver(host)

        assert await resolver.resolve() == []
        assert resolver.offer_product is None
        assert resolver.loading is False

    @pytest.mark.asyncio
    async def test_loading_while_query_in_flight(self, host):
        """loading is true from invocation until the query settles."""
        resolver = CatalogResolver(host)
        seen = []

        async def query(document, variables):
            seen.append(resolver.loading)
            return {"products": {"nodes": []}}

        host.query = AsyncMock(side_effect=query)

        assert resolver.loading is False
        await resolver.resolve()

        assert seen == [True]
        assert resolver.loading is False

    @pytest.mark.asyncio
    async def test_query_failure_means_no_offer(self, host):
        """Errors are logged and treated like a missing product."""
        host.query = AsyncMock(side_effect=StorefrontError("boom", code="NETWORK"))
        resolver = CatalogResolver(host)

        products = await resolver.resolve()

        assert products == []
        assert resolver.loading is False
        host.query.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_malformed_payload_means_no_offer(self, host):
        host.query = AsyncMock(return_value={})
        resolver = CatalogResolver(host)

        assert await resolver.resolve() == []
        assert resolver.loading is False

    @pytest.mark.asyncio
    async def test_target_without_variant_is_skipped(self):
        node = product_node("shipping-insurance")
        node["variants"] = {"nodes": []}
        resolver = CatalogResolver(FakeHost(nodes=[node]))

        assert await resolver.resolve() == []

    @pytest.mark.asyncio
    async def test_first_match_wins(self):
        host = FakeHost(nodes=[
            product_node("shipping-insurance", variant_id="V-first"),
            product_node("shipping-insurance", variant_id="V-second"),
        ])
        resolver = CatalogResolver(host)

        products = await resolver.resolve()

        assert len(products) == 1
        assert products[0].variant_id == "V-first"

    @pytest.mark.asyncio
    async def test_transport_exception_means_no_offer(self, host):
        """A raw httpx error from the host is contained like a storefront error."""
        host.query = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        resolver = CatalogResolver(host)

        products = await resolver.resolve()

        assert products == []
        assert resolver.offer_product is None
        assert resolver.loading is False

    @pytest.mark.asyncio
    async def test_non_dict_nodes_are_skipped(self, host):
        host.query = AsyncMock(return_value={"products": {"nodes": [None, "x", product_node("a")]}})
        resolver = CatalogResolver(host)

        assert await resolver.resolve() == []
        assert resolver.loading is False

    @pytest.mark.asyncio
    async def test_non_list_nodes_means_no_offer(self, host):
        host.query = AsyncMock(return_value={"products": {"nodes": {"handle": "shipping-insurance"}}})
        resolver = CatalogResolver(host)

        assert await resolver.resolve() == []

    @pytest.mark.asyncio
    async def test_non_dict_data_means_no_offer(self, host):
        host.query = AsyncMock(return_value=["products"])
        resolver = CatalogResolver(host)

        assert await resolver.resolve() == []
        assert resolver.loading is False

    @pytest.mark.asyncio
    async def test_failure_is_not_reported_as_not_found(self, host, caplog):
        host.query = AsyncMock(side_effect=StorefrontError("boom", code="NETWORK"))
        caplog.set_level(logging.INFO, logger="insurance_offer.offer.catalog")

        await CatalogResolver(host).resolve()

        messages = [r.getMessage() for r in caplog.records]
        assert any("Catalog query failed" in m for m in messages)
        assert not any("not found" in m for m in messages)

    @pytest.mark.asyncio
    async def test_missing_handle_is_reported(self, caplog):
        caplog.set_level(logging.INFO, logger="insurance_offer.offer.catalog")

        await CatalogResolver(FakeHost(nodes=[product_node("a")])).resolve()

        assert any("not found" in r.getMessage() for r in caplog.records)
