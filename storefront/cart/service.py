"""
Cas d'usage 'cart': orchestre store (cookie), engine (mutations pures) et pricing.
Les fonctions reçoivent le panier brut déjà chargé et retournent le nouveau panier brut;
la vue se charge d'écrire le cookie une seule fois en fin de requête.
"""
import logging
from typing import List

from storefront.cart import engine, pricing
from storefront.cart.models import DetailedCart, RawCart
from storefront.catalog.provider import CatalogProvider

logger = logging.getLogger(__name__)

def detailed_cart(raw: RawCart, catalog: CatalogProvider) -> DetailedCart:
    """Résout le panier contre le snapshot courant (jamais mis en cache)."""
    return pricing.resolve(raw, catalog.get_products())

def add_to_cart(raw: RawCart, catalog: CatalogProvider, product_id: str, quantity: int, selected_addons: List[str]) -> RawCart:
    product = catalog.get_product(product_id)
    if product is None:
        logger.info("cart.add unknown product_id=%s (kept, dropped at resolution)", product_id)
    return engine.add_or_increment(raw, product_id, quantity, selected_addons, product=product)

def update_quantity(raw: RawCart, product_id: str, quantity: int) -> RawCart:
    return engine.set_quantity(raw, product_id, quantity)

def update_addons(raw: RawCart, product_id: str, selected_addons: List[str]) -> RawCart:
    return engine.set_addons(raw, product_id, selected_addons)

def remove_from_cart(raw: RawCart, product_id: str) -> RawCart:
    return engine.remove_item(raw, product_id)

def clear_cart(raw: RawCart) -> RawCart:
    return engine.clear(raw)
