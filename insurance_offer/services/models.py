"""Storefront Models - Pydantic models for catalog products and cart lines."""
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from insurance_offer.services.money import to_decimal as _to_decimal


class ProductVariant(BaseModel):
    """Canonical purchasable variant of a catalog product."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    price: Decimal

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        # GraphQL shape: {"amount": "4.99", "currencyCode": "USD"}
        if isinstance(v, dict):
            v = v.get("amount")
        return _to_decimal(v)


class CatalogProduct(BaseModel):
    """Immutable snapshot of a catalog product, fetched once per mount."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str
    handle: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    variant: ProductVariant

    @property
    def variant_id(self) -> str:
        return self.variant.id

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> "CatalogProduct":
        """
        Build from a ``products.nodes[]`` entry of the catalog query.

        Raises:
            ValueError: if the node has no variant (pydantic ValidationError included)
        """
        images = (node.get("images") or {}).get("nodes") or []
        variants = (node.get("variants") or {}).get("nodes") or []
        if not variants:
            raise ValueError(f"Product {node.get('handle')!r} has no variants")
        return cls(
            id=node["id"],
            title=node.get("title") or "",
            handle=node.get("handle") or "",
            description=node.get("description") or None,
            image_url=images[0].get("url") if images else None,
            variant=ProductVariant(**variants[0]),
        )


class CartLine(BaseModel):
    """One merchandise entry in the host-owned cart."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    merchandise_id: str
    quantity: int = Field(ge=0)

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> "CartLine":
        """Build from a storefront ``cart.lines.nodes[]`` entry."""
        return cls(
            id=node["id"],
            merchandise_id=node["merchandise"]["id"],
            quantity=int(node["quantity"]),
        )


class CartLineChangeType(str, Enum):
    """Cart line mutation kinds."""
    ADD = "addCartLine"
    REMOVE = "removeCartLine"


class AddCartLine(BaseModel):
    """Add ``quantity`` units of a variant."""
    model_config = ConfigDict(frozen=True)

    type: Literal[CartLineChangeType.ADD] = CartLineChangeType.ADD
    merchandise_id: str
    quantity: int = Field(default=1, ge=1)


class RemoveCartLine(BaseModel):
    """Remove ``quantity`` units from an existing line."""
    model_config = ConfigDict(frozen=True)

    type: Literal[CartLineChangeType.REMOVE] = CartLineChangeType.REMOVE
    id: str
    quantity: int = Field(ge=1)


CartLineChange = Union[AddCartLine, RemoveCartLine]


class CartLineChangeResultType(str, Enum):
    """Result tag of a cart mutation."""
    SUCCESS = "success"
    ERROR = "error"


class CartLineChangeResult(BaseModel):
    """Tagged result of a cart mutation; callers branch only on ``type``."""
    model_config = ConfigDict(frozen=True)

    type: CartLineChangeResultType
    message: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.type == CartLineChangeResultType.ERROR

    @classmethod
    def success(cls) -> "CartLineChangeResult":
        return cls(type=CartLineChangeResultType.SUCCESS)

    @classmethod
    def error(cls, message: str) -> "CartLineChangeResult":
        return cls(type=CartLineChangeResultType.ERROR, message=message)
