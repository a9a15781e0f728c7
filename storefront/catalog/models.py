# module storefront.catalog.models
"""
Modèles du catalogue (lecture seule).
- Product / Addon: validés à la frontière (Stripe, fallback) via pydantic.
- Money: Decimal arrondi au centime (ROUND_HALF_UP) dès la validation, nombre JSON côté API.
  Le sous-total affiché et les lignes Stripe partent ainsi des mêmes montants.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

Money = Annotated[
    Decimal,
    Field(ge=0),
    AfterValidator(_to_cents),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class Addon(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    price: Money = Decimal("0")
    tags: List[str] = Field(default_factory=list)


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    price: Money = Decimal("0")
    image: str = ""
    tags: List[str] = Field(default_factory=list)
    addons: List[Addon] = Field(default_factory=list)

    def find_addon(self, addon_id: str) -> Optional[Addon]:
        for addon in self.addons:
            if addon.id == addon_id:
                return addon
        return None
