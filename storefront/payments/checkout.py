"""
Construction de la requête Checkout Stripe à partir du panier détaillé (pas d'appel Stripe ici).

- Une ligne par produit: unit_amount = prix produit, quantity = quantité de la ligne.
- Une ligne par add-on sélectionné encore présent sur le produit:
  unit_amount = prix add-on, quantity = quantité du produit parent, nom "{addon} (Addon)".
- Les descriptions vides sont omises (Stripe refuse une description vide).
- Metadata compacte pour reconstituer la commande côté webhook.
"""
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from storefront import config
from storefront.cart.models import DetailedCart
from storefront.cart.pricing import to_minor_units
from storefront.payments import metadata as payments_metadata

# module storefront.payments.checkout
def image_url(image: str, base_url: str = config.BASE_URL) -> Optional[str]:
    if not image:
        return None
    if image.startswith(("http://", "https://")):
        return image
    return f"{base_url.rstrip('/')}/{image.lstrip('/')}"

def make_line_item(
    *,
    name: str,
    unit_amount: int,
    quantity: int,
    currency: str,
    description: Optional[str] = None,
    images: Optional[List[str]] = None,
) -> Dict[str, Any]:
    product_data: Dict[str, Any] = {"name": name}
    if description and description.strip():
        product_data["description"] = description
    if images:
        product_data["images"] = images
    return {
        "quantity": quantity,
        "price_data": {
            "currency": currency,
            "unit_amount": unit_amount,
            "product_data": product_data,
        },
    }

def to_line_items(
    detailed_cart: DetailedCart,
    currency: str = config.CURRENCY,
    base_url: str = config.BASE_URL,
) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) du panier.
    - Les add-ons inconnus du produit sont ignorés (comme dans le calcul du sous-total).
    """
    line_items: List[Dict[str, Any]] = []
    for item in detailed_cart.items:
        product = item.product
        image = image_url(product.image, base_url)
        line_items.append(make_line_item(
            name=product.name,
            unit_amount=to_minor_units(product.price),
            quantity=item.quantity,
            currency=currency,
            description=product.description,
            images=[image] if image else None,
        ))
        for addon_id in item.selected_addons:
            addon = product.find_addon(addon_id)
            if addon is None:
                continue
            line_items.append(make_line_item(
                name=f"{addon.name} (Addon)",
                unit_amount=to_minor_units(addon.price),
                quantity=item.quantity,
                currency=currency,
                description=addon.description,
            ))
    return line_items

def build_checkout_request(
    detailed_cart: DetailedCart,
    *,
    success_url: str,
    cancel_url: str,
    currency: str = config.CURRENCY,
    base_url: str = config.BASE_URL,
) -> Dict[str, Any]:
    """
    Paramètres complets de stripe.checkout.Session.create.
    - Soulève HTTPException(400) si le panier est vide (avant tout appel Stripe).
    """
    if not detailed_cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")
    return {
        "line_items": to_line_items(detailed_cart, currency=currency, base_url=base_url),
        "mode": "payment",
        "success_url": success_url,
        "cancel_url": cancel_url,
        "metadata": payments_metadata.make_metadata(detailed_cart),
    }

def default_redirect_urls(base_url: str = config.BASE_URL) -> Dict[str, str]:
    base = base_url.rstrip("/")
    return {
        "success_url": f"{base}{config.CHECKOUT_SUCCESS_PATH}",
        "cancel_url": f"{base}{config.CHECKOUT_CANCEL_PATH}",
    }
