"""
Logique panier pure (pas de Stripe, pas de cookie).

Chaque opération prend un panier brut et retourne une nouvelle liste:
l'entrée n'est jamais modifiée. Les opérations sont totales: elles ne lèvent
pas d'erreur, elles produisent seulement un panier éventuellement différent
de l'attente de l'appelant (ex: set_quantity crée l'entrée absente).
"""
from typing import Iterable, List, Optional

from storefront.cart.models import RawCart, RawCartEntry
from storefront.catalog.models import Product

# module storefront.cart.engine
def _index_of(cart: RawCart, product_id: str) -> int:
    for idx, entry in enumerate(cart):
        if entry.product_id == product_id:
            return idx
    return -1

def add_or_increment(
    cart: RawCart,
    product_id: str,
    quantity: int,
    selected_addons: Optional[Iterable[str]] = None,
    product: Optional[Product] = None,
) -> RawCart:
    """
    Ajoute un produit ou fusionne avec la ligne existante.
    - Ligne absente: ajout {productId, quantity, selectedAddons}.
    - Ligne présente, produit avec add-ons et nouvelle sélection non vide:
      la sélection est remplacée, la quantité ne bouge pas (reconfiguration).
    - Sinon: quantité incrémentée; une sélection non vide écrase l'ancienne,
      une sélection vide la conserve.
    - Les lignes de quantité <= 0 sont retirées du résultat.
    `product` (catalogue) sert uniquement à savoir si le produit a des add-ons.
    """
    addons = list(selected_addons or [])
    items: List[RawCartEntry] = list(cart)
    idx = _index_of(items, product_id)

    if idx < 0:
        items.append(RawCartEntry(product_id=product_id, quantity=quantity, selected_addons=addons))
    else:
        existing = items[idx]
        has_addon_catalog = bool(product is not None and product.addons)
        if has_addon_catalog and addons:
            items[idx] = existing.model_copy(update={"selected_addons": addons})
        else:
            items[idx] = RawCartEntry(
                product_id=product_id,
                quantity=existing.quantity + quantity,
                selected_addons=addons if addons else list(existing.selected_addons),
            )

    return [it for it in items if it.quantity > 0]

def set_quantity(cart: RawCart, product_id: str, quantity: int) -> RawCart:
    """
    Fixe la quantité exacte (pas d'incrément).
    - quantity <= 0: supprime la ligne si elle existe.
    - Ligne absente et quantity > 0: la crée (upsert), sans add-ons.
    """
    items: List[RawCartEntry] = list(cart)
    idx = _index_of(items, product_id)
    if idx >= 0:
        if quantity <= 0:
            del items[idx]
        else:
            items[idx] = items[idx].model_copy(update={"quantity": quantity})
    elif quantity > 0:
        items.append(RawCartEntry(product_id=product_id, quantity=quantity))
    return items

def set_addons(cart: RawCart, product_id: str, selected_addons: Iterable[str]) -> RawCart:
    """Remplace la sélection d'add-ons de la ligne existante (no-op si absente)."""
    addons = list(selected_addons)
    return [
        it.model_copy(update={"selected_addons": addons}) if it.product_id == product_id else it
        for it in cart
    ]

def remove_item(cart: RawCart, product_id: str) -> RawCart:
    return [it for it in cart if it.product_id != product_id]

def clear(cart: RawCart) -> RawCart:
    return []
