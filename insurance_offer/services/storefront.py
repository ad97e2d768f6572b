"""Storefront API host.

Implements the checkout host contract over the Shopify Storefront GraphQL
API, for running the widget outside a checkout extension runtime (server
side rendering, integration checks).
"""

from typing import Any

import httpx

from insurance_offer.cart import LiveCartLines
from insurance_offer.config import DEFAULT_SHOPIFY_API_VERSION, OFFER_CURRENCY, validate_storefront_config
from insurance_offer.errors import (
    ERROR_GRAPHQL,
    ERROR_NO_CART,
    ERROR_STOREFRONT_HTTP,
    ERROR_STOREFRONT_UNREACHABLE,
    ERROR_UNKNOWN_CHANGE,
    CartMutationError,
    StorefrontError,
)
from insurance_offer.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from insurance_offer.services.currency import LocalizationService
from insurance_offer.services.models import (
    AddCartLine,
    CartLine,
    CartLineChange,
    CartLineChangeResult,
    RemoveCartLine,
)

logger = get_logger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"
CART_LINES_PAGE_SIZE = 100

_CART_FIELDS = """
  id
  lines(first: %d) {
    nodes {
      id
      quantity
      merchandise {
        ... on ProductVariant {
          id
        }
      }
    }
  }
""" % CART_LINES_PAGE_SIZE

_USER_ERRORS = """
  userErrors {
    field
    message
  }
"""

CART_QUERY = "query ($cartId: ID!) { cart(id: $cartId) { %s } }" % _CART_FIELDS

CART_CREATE_MUTATION = """
mutation ($lines: [CartLineInput!]) {
  cartCreate(input: {lines: $lines}) {
    cart { %s }
    %s
  }
}
""" % (_CART_FIELDS, _USER_ERRORS)

CART_LINES_ADD_MUTATION = """
mutation ($cartId: ID!, $lines: [CartLineInput!]!) {
  cartLinesAdd(cartId: $cartId, lines: $lines) {
    cart { %s }
    %s
  }
}
""" % (_CART_FIELDS, _USER_ERRORS)

CART_LINES_REMOVE_MUTATION = """
mutation ($cartId: ID!, $lineIds: [ID!]!) {
  cartLinesRemove(cartId: $cartId, lineIds: $lineIds) {
    cart { %s }
    %s
  }
}
""" % (_CART_FIELDS, _USER_ERRORS)

CART_LINES_UPDATE_MUTATION = """
mutation ($cartId: ID!, $lines: [CartLineUpdateInput!]!) {
  cartLinesUpdate(cartId: $cartId, lines: $lines) {
    cart { %s }
    %s
  }
}
""" % (_CART_FIELDS, _USER_ERRORS)


def _parse_error_response(response: httpx.Response) -> str:
    """Pull a readable message out of a failed storefront response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] if response.text else ERROR_STOREFRONT_HTTP.format(status=response.status_code)
    if isinstance(data, dict) and data.get("errors"):
        errors = data["errors"]
        if isinstance(errors, list):
            return "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
        return str(errors)
    return ERROR_STOREFRONT_HTTP.format(status=response.status_code)


def _parse_cart_lines(cart: dict[str, Any] | None) -> list[CartLine]:
    if not cart:
        return []
    nodes = (cart.get("lines") or {}).get("nodes") or []
    return [CartLine.from_node(node) for node in nodes]


class StorefrontHost:
    """Checkout host backed by the Storefront API."""

    def __init__(
        self,
        shop_url: str | None = None,
        access_token: str | None = None,
        api_version: str | None = None,
        cart_id: str | None = None,
        i18n: LocalizationService | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if shop_url is None or access_token is None:
            config = validate_storefront_config()
            shop_url = shop_url or config["shop_url"]
            access_token = access_token or config["access_token"]
            api_version = api_version or config["api_version"]

        self.endpoint = f"{shop_url.rstrip('/')}/api/{api_version or DEFAULT_SHOPIFY_API_VERSION}/graphql.json"
        self.access_token = access_token
        self.cart_id = cart_id
        self.lines = LiveCartLines()
        self.i18n = i18n or LocalizationService(currency=OFFER_CURRENCY)

        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=10.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                headers={ACCESS_TOKEN_HEADER: self.access_token},
                transport=self._transport,
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "StorefrontHost":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def query(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Run a GraphQL document against the storefront.

        Args:
            document: GraphQL query or mutation
            variables: GraphQL variables

        Returns:
            The response ``data`` object

        Raises:
            StorefrontError: on network failure, non-2xx status or GraphQL errors
        """
        client = await self._get_http_client()
        try:
            response = await client.post(
                self.endpoint, json={"query": document, "variables": variables or {}}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_detail = _parse_error_response(e.response)
            logger.error(
                f"Storefront API error {e.response.status_code}: {sanitize_string_for_logging(error_detail)}"
            )
            raise StorefrontError(error_detail, code="HTTP", status=e.response.status_code, raw_error=e) from e
        except httpx.RequestError as e:
            logger.error(f"Storefront network error: {e!s}")
            raise StorefrontError(f"{ERROR_STOREFRONT_UNREACHABLE}: {e!s}", code="NETWORK", raw_error=e) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise StorefrontError("Storefront API returned invalid JSON", code="DECODE", raw_error=e) from e

        if payload.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in payload["errors"])
            raise StorefrontError(ERROR_GRAPHQL.format(messages=messages), code="GRAPHQL", raw_error=payload)

        return payload.get("data") or {}

    async def refresh_lines(self) -> tuple[CartLine, ...]:
        """Re-read the cart and publish its lines."""
        if not self.cart_id:
            self.lines.publish([])
            return self.lines.value
        data = await self.query(CART_QUERY, {"cartId": self.cart_id})
        self.lines.publish(_parse_cart_lines(data.get("cart")))
        return self.lines.value

    async def apply_cart_lines_change(self, change: CartLineChange) -> CartLineChangeResult:
        """
        Apply one cart line change.

        Failures never raise: transport errors and ``userErrors`` come back
        as an error result carrying a readable message. On success the cart
        returned by the mutation is republished to ``lines``.
        """
        try:
            if isinstance(change, AddCartLine):
                cart = await self._add_line(change)
            elif isinstance(change, RemoveCartLine):
                cart = await self._remove_line(change)
            else:
                raise CartMutationError(ERROR_UNKNOWN_CHANGE.format(type=type(change).__name__), code="UNSUPPORTED")
        except StorefrontError as e:
            logger.warning(f"Cart change {type(change).__name__} rejected: {sanitize_string_for_logging(e.message)}")
            return CartLineChangeResult.error(e.message)

        self.cart_id = cart.get("id") or self.cart_id
        self.lines.publish(_parse_cart_lines(cart))
        return CartLineChangeResult.success()

    async def _add_line(self, change: AddCartLine) -> dict[str, Any]:
        lines = [{"merchandiseId": change.merchandise_id, "quantity": change.quantity}]
        if not self.cart_id:
            logger.info("No cart yet, creating one")
            data = await self.query(CART_CREATE_MUTATION, {"lines": lines})
            return self._unwrap_mutation(data, "cartCreate")
        data = await self.query(CART_LINES_ADD_MUTATION, {"cartId": self.cart_id, "lines": lines})
        return self._unwrap_mutation(data, "cartLinesAdd")

    async def _remove_line(self, change: RemoveCartLine) -> dict[str, Any]:
        if not self.cart_id:
            raise CartMutationError(ERROR_NO_CART, code="NO_CART")

        current = next((line for line in self.lines.value if line.id == change.id), None)
        if current is not None and current.quantity > change.quantity:
            remaining = current.quantity - change.quantity
            data = await self.query(
                CART_LINES_UPDATE_MUTATION,
                {"cartId": self.cart_id, "lines": [{"id": change.id, "quantity": remaining}]},
            )
            return self._unwrap_mutation(data, "cartLinesUpdate")

        logger.debug(f"Removing cart line {sanitize_id_for_logging(change.id)}")
        data = await self.query(CART_LINES_REMOVE_MUTATION, {"cartId": self.cart_id, "lineIds": [change.id]})
        return self._unwrap_mutation(data, "cartLinesRemove")

    @staticmethod
    def _unwrap_mutation(data: dict[str, Any], field: str) -> dict[str, Any]:
        """Return the mutated cart or raise on ``userErrors``."""
        result = data.get(field) or {}
        user_errors = result.get("userErrors") or []
        if user_errors:
            message = "; ".join(str(err.get("message", "")) for err in user_errors) or "Cart update rejected"
            raise CartMutationError(message, code="USER_ERROR")
        cart = result.get("cart")
        if not cart:
            raise CartMutationError("Cart missing from mutation response")
        return cart
