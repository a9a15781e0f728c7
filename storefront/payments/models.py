# module storefront.payments.models
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderLine(BaseModel):
    """Ligne reconstituée depuis la metadata Stripe (donnée non fiable, validée)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(alias="productId", min_length=1)
    quantity: int = Field(gt=0)
    selected_addons: List[str] = Field(default_factory=list, alias="selectedAddons")


class Order(BaseModel):
    session_id: str
    payment_status: Optional[str] = None
    customer_email: Optional[str] = None
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    lines: List[OrderLine] = Field(default_factory=list)
