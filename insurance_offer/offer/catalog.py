"""
Catalog Resolver

Finds the single product the widget offers. One bounded catalog query per
mount; the offer is pinned to a configured handle.
"""

from pydantic import ValidationError

from insurance_offer.config import OFFER_CATALOG_PAGE_SIZE, OFFER_PRODUCT_HANDLE
from insurance_offer.errors import ERROR_PRODUCTS_MISSING, CatalogQueryError, StorefrontError
from insurance_offer.host import CheckoutHost
from insurance_offer.logging import get_logger
from insurance_offer.services.models import CatalogProduct

logger = get_logger(__name__)

PRODUCTS_QUERY = """
query ($first: Int!) {
  products(first: $first) {
    nodes {
      id
      title
      handle
      description
      images(first: 1) {
        nodes {
          url
        }
      }
      variants(first: 1) {
        nodes {
          id
          price {
            amount
          }
        }
      }
    }
  }
}
"""


class CatalogResolver:
    """
    Resolves the configured offer product.

    ``products`` holds exactly one product or nothing. ``loading`` is true
    from the start of ``resolve`` until the query settles either way.

    Only the first page is searched; a product past it is never offered.
    """

    def __init__(
        self,
        host: CheckoutHost,
        target_handle: str = OFFER_PRODUCT_HANDLE,
        page_size: int = OFFER_CATALOG_PAGE_SIZE,
    ):
        self.host = host
        self.target_handle = target_handle
        self.page_size = page_size
        self.products: list[CatalogProduct] = []
        self.loading = False

    @property
    def offer_product(self) -> CatalogProduct | None:
        return self.products[0] if self.products else None

    async def resolve(self) -> list[CatalogProduct]:
        """
        Fetch one catalog page and select the target product.

        Query failures are logged and leave ``products`` empty; nothing is
        raised to the caller.
        """
        self.loading = True
        try:
            nodes = await self._fetch_nodes()
            match = self._select(nodes)
            self.products = [match] if match else []
        except StorefrontError as e:
            logger.error(f"Catalog query failed, offer disabled: {e}")
            self.products = []
            return self.products
        except Exception:
            logger.exception("Catalog query failed, offer disabled")
            self.products = []
            return self.products
        finally:
            self.loading = False

        if not self.products:
            logger.info(f"Offer product '{self.target_handle}' not found in first {self.page_size} products")
        return self.products

    async def _fetch_nodes(self) -> list[dict]:
        data = await self.host.query(PRODUCTS_QUERY, {"first": self.page_size})
        products = data.get("products") if isinstance(data, dict) else None
        if not isinstance(products, dict):
            raise CatalogQueryError(ERROR_PRODUCTS_MISSING, raw_error=data)
        nodes = products.get("nodes") or []
        if not isinstance(nodes, list):
            raise CatalogQueryError(ERROR_PRODUCTS_MISSING, raw_error=data)
        return nodes

    def _select(self, nodes: list[dict]) -> CatalogProduct | None:
        node = next(
            (n for n in nodes if isinstance(n, dict) and n.get("handle") == self.target_handle), None
        )
        if node is None:
            return None
        try:
            return CatalogProduct.from_node(node)
        except (ValueError, KeyError, ValidationError) as e:
            logger.warning(f"Offer product '{self.target_handle}' is not purchasable: {e}")
            return None
