# module storefront.cart.models
"""
Modèles du panier.
- RawCartEntry: forme persistée (cookie) {productId, quantity, selectedAddons}.
- DetailedCartItem / DetailedCart: vues dérivées, recalculées à chaque lecture.
Les alias camelCase correspondent au format JSON attendu par le front.
"""
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from storefront.catalog.models import Money, Product


class RawCartEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    product_id: str = Field(alias="productId")
    quantity: int
    selected_addons: List[str] = Field(default_factory=list, alias="selectedAddons")

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


RawCart = List[RawCartEntry]


class DetailedCartItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    product: Product
    quantity: int
    selected_addons: List[str] = Field(default_factory=list, alias="selectedAddons")


class DetailedCart(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    items: List[DetailedCartItem] = Field(default_factory=list)
    subtotal: Money = Decimal("0.00")
    total_item_count: int = Field(default=0, alias="totalItems")

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
