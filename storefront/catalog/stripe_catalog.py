"""
Source du catalogue: produits Stripe actifs, avec repli sur un catalogue intégré.
- Prix: default_price.unit_amount (centimes) converti en unités majeures.
- Add-ons: metadata["addons"] (JSON), tags: metadata["tags"] (séparés par des virgules).
- Tolérant: un add-on invalide est ignoré, un produit invalide est ignoré,
  un échec Stripe renvoie le catalogue de repli.
"""
import json
import logging
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import ValidationError

from storefront import config
from storefront.catalog.models import Addon, Product
from storefront.payments import stripe_client

logger = logging.getLogger(__name__)

# module storefront.catalog.stripe_catalog
def parse_addons(raw: Any, product_id: str = "") -> List[Addon]:
    if not raw:
        return []
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        logger.warning("catalog.parse_addons invalid JSON product_id=%s", product_id)
        return []
    if not isinstance(items, list):
        return []
    addons: List[Addon] = []
    for it in items:
        try:
            addons.append(Addon.model_validate(it))
        except ValidationError:
            logger.warning("catalog.parse_addons skipped addon product_id=%s addon=%s", product_id, it)
    return addons

def parse_tags(raw: Any) -> List[str]:
    if not raw or not isinstance(raw, str):
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]

def product_from_stripe(obj: Any) -> Optional[Product]:
    """Transforme un produit Stripe en Product (None si invalide)."""
    field = stripe_client.field
    default_price = field(obj, "default_price")
    unit_amount = field(default_price, "unit_amount") if not isinstance(default_price, str) else None
    price = (Decimal(unit_amount) / 100) if unit_amount is not None else Decimal("0")
    metadata = field(obj, "metadata", {})
    images = field(obj, "images", []) or []
    product_id = field(obj, "id", "")
    try:
        return Product(
            id=product_id,
            name=field(obj, "name", ""),
            description=field(obj, "description", "") or "",
            price=price,
            image=images[0] if images else config.DEFAULT_PRODUCT_IMAGE,
            tags=parse_tags(field(metadata, "tags")),
            addons=parse_addons(field(metadata, "addons"), product_id),
        )
    except ValidationError:
        logger.warning("catalog.product_from_stripe skipped product_id=%s", product_id)
        return None

def fetch_products_from_stripe() -> List[Product]:
    """
    Liste les produits Stripe actifs et les convertit.
    - Sans STRIPE_SECRET_KEY: catalogue de repli (avertissement).
    - En cas d’erreur Stripe: catalogue de repli (erreur journalisée).
    """
    if not stripe_client.is_configured():
        logger.warning("STRIPE_SECRET_KEY absent, catalogue de repli utilisé")
        return fallback_products()
    try:
        products = []
        for obj in stripe_client.list_active_products():
            product = product_from_stripe(obj)
            if product is not None:
                products.append(product)
        return products
    except Exception:
        logger.exception("catalog.fetch_products_from_stripe failed")
        return fallback_products()

def fallback_products() -> List[Product]:
    return [
        Product(
            id="website-package",
            name="Website Package",
            description=(
                "Professional website development package. Includes responsive design, SEO optimization, "
                "and modern UI/UX. Perfect for businesses, portfolios, or personal projects."
            ),
            price=Decimal("30.00"),
            image=config.DEFAULT_PRODUCT_IMAGE,
            tags=["service", "website", "package", "development"],
            addons=[
                Addon(
                    id="ecommerce",
                    name="E-commerce Integration",
                    description="Add shopping cart, payment processing, and product management",
                    price=Decimal("15.00"),
                    tags=["ecommerce", "payment", "shopping"],
                ),
                Addon(
                    id="blog",
                    name="Blog System",
                    description="Content management system with blog functionality",
                    price=Decimal("10.00"),
                    tags=["blog", "cms", "content"],
                ),
                Addon(
                    id="analytics",
                    name="Analytics & SEO",
                    description="Advanced analytics, SEO optimization, and performance monitoring",
                    price=Decimal("12.00"),
                    tags=["analytics", "seo", "performance"],
                ),
                Addon(
                    id="custom-design",
                    name="Custom Design",
                    description="Fully custom design tailored to your brand and preferences",
                    price=Decimal("20.00"),
                    tags=["design", "custom", "branding"],
                ),
                Addon(
                    id="hosting",
                    name="Hosting Setup",
                    description="Domain setup, hosting configuration, and deployment",
                    price=Decimal("8.00"),
                    tags=["hosting", "domain", "deployment"],
                ),
                Addon(
                    id="maintenance",
                    name="3-Month Maintenance",
                    description="3 months of updates, security patches, and technical support",
                    price=Decimal("25.00"),
                    tags=["maintenance", "support", "updates"],
                ),
            ],
        )
    ]
