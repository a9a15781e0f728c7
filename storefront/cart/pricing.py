"""
Résolution du panier brut contre le catalogue courant.

Règle d'arrondi: montants en Decimal, sous-total arrondi à 0.01 en
ROUND_HALF_UP; conversion en unités mineures (centimes) en ROUND_HALF_UP.
Le sous-total n'est jamais stocké: il est recalculé à chaque lecture pour
suivre les prix du catalogue.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from storefront.cart.models import DetailedCart, DetailedCartItem, RawCart
from storefront.catalog.models import Product

CENT = Decimal("0.01")

# module storefront.cart.pricing
def round_money(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)

def to_minor_units(amount: Decimal) -> int:
    """Convertit un montant (unités majeures) en centimes entiers."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def addons_unit_price(product: Product, selected_addons: Iterable[str]) -> Decimal:
    """Somme des prix des add-ons sélectionnés; un id inconnu compte pour 0."""
    total = Decimal("0")
    for addon_id in selected_addons:
        addon = product.find_addon(addon_id)
        if addon is not None:
            total += addon.price
    return total

def line_total(item: DetailedCartItem) -> Decimal:
    """Prix d'une ligne: (prix produit + add-ons) x quantité, add-ons par unité."""
    unit = item.product.price + addons_unit_price(item.product, item.selected_addons)
    return unit * item.quantity

def resolve(cart: RawCart, catalog: Iterable[Product]) -> DetailedCart:
    """
    Construit le DetailedCart:
    - ignore les lignes dont le produit est introuvable ou la quantité <= 0;
    - subtotal = somme des lignes, arrondie à 2 décimales;
    - totalItems = somme des quantités (les add-ons ne comptent pas).
    """
    products: Dict[str, Product] = {p.id: p for p in catalog}
    items: List[DetailedCartItem] = []
    for entry in cart:
        product = products.get(entry.product_id)
        if product is None or entry.quantity <= 0:
            continue
        items.append(DetailedCartItem(
            product=product,
            quantity=entry.quantity,
            selected_addons=list(entry.selected_addons),
        ))

    subtotal = round_money(sum((line_total(it) for it in items), Decimal("0")))
    total_items = sum(it.quantity for it in items)
    return DetailedCart(items=items, subtotal=subtotal, total_item_count=total_items)
