"""
Cas d'usage 'payments': orchestre checkout (pur), metadata et client Stripe.
Un échec Stripe remonte en 500 à l'appelant, sans relance ni modification du panier.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import stripe
from fastapi import HTTPException

from storefront import config
from storefront.cart.models import DetailedCart
from storefront.payments import checkout
from storefront.payments import stripe_client

logger = logging.getLogger(__name__)

def _session_response(session: Dict[str, Any]) -> Dict[str, Any]:
    return {"sessionId": session.get("id"), "url": session.get("url")}

def process_cart_checkout(
    detailed_cart: DetailedCart,
    *,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Prépare puis crée la session Stripe à partir du panier détaillé.
    - 400 si panier vide (avant tout appel Stripe), 500 si Stripe absent ou en échec.
    Retour: {"sessionId": ..., "url": ...}
    """
    urls = checkout.default_redirect_urls()
    request_params = checkout.build_checkout_request(
        detailed_cart,
        success_url=success_url or urls["success_url"],
        cancel_url=cancel_url or urls["cancel_url"],
    )
    stripe_client.require_stripe()
    try:
        session = stripe_client.create_session(**request_params)
    except HTTPException:
        raise
    except Exception:
        logger.exception("payments.service.process_cart_checkout failed items=%s", len(detailed_cart.items))
        raise HTTPException(status_code=500, detail="Failed to create checkout session")
    logger.info("payments.checkout session_id=%s line_items=%s", session.get("id"), len(request_params["line_items"]))
    return _session_response(session)

def process_price_checkout(
    price_ids: List[str],
    quantities: List[int],
    *,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Checkout direct à partir de prix Stripe existants.
    - 404 si un prix est introuvable, 500 si Stripe échoue.
    """
    stripe_client.require_stripe()
    line_items: List[Dict[str, Any]] = []
    for price_id, qty in zip(price_ids, quantities):
        try:
            stripe_client.get_price(price_id)
        except stripe.InvalidRequestError:
            raise HTTPException(status_code=404, detail=f"Price {price_id} not found")
        except Exception:
            logger.exception("payments.service.process_price_checkout price lookup failed price_id=%s", price_id)
            raise HTTPException(status_code=500, detail="Failed to create checkout session")
        line_items.append({"price": price_id, "quantity": qty})

    urls = checkout.default_redirect_urls()
    try:
        session = stripe_client.create_session(
            line_items=line_items,
            mode="payment",
            success_url=success_url or urls["success_url"],
            cancel_url=cancel_url or urls["cancel_url"],
        )
    except Exception:
        logger.exception("payments.service.process_price_checkout failed prices=%s", price_ids)
        raise HTTPException(status_code=500, detail="Failed to create checkout session")
    return _session_response(session)

def retrieve_session(session_id: str) -> Dict[str, Any]:
    """Lecture d'une session Checkout (payment_intent étendu). 404 si inconnue."""
    if not session_id:
        raise HTTPException(status_code=400, detail="Session ID required")
    stripe_client.require_stripe()
    try:
        return stripe_client.get_session(session_id, expand=["payment_intent"])
    except stripe.InvalidRequestError:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception:
        logger.exception("payments.service.retrieve_session failed session_id=%s", session_id)
        raise HTTPException(status_code=500, detail="Failed to retrieve session")

def _price_product(product: Any) -> Optional[Dict[str, Any]]:
    """Résumé du produit étendu; None si Stripe n'a renvoyé que son identifiant."""
    if product is None or isinstance(product, str):
        return None
    field = stripe_client.field
    images = field(product, "images", []) or []
    tags = field(field(product, "metadata", {}), "tags", "")
    return {
        "id": field(product, "id"),
        "name": field(product, "name", ""),
        "description": field(product, "description", ""),
        "image": images[0] if images else config.DEFAULT_PRODUCT_IMAGE,
        "tags": [t.strip() for t in tags.split(",") if t.strip()] if isinstance(tags, str) else [],
    }

def retrieve_price(price_id: str) -> Dict[str, Any]:
    """
    Prix Stripe (produit étendu) au format attendu par le front.
    Retour: {priceId, productId, product, unitAmount, currency, price}
    Erreurs: 404 si le prix est inconnu de Stripe, 500 sinon.
    """
    if not price_id:
        raise HTTPException(status_code=400, detail="Price ID required")
    stripe_client.require_stripe()
    try:
        price = stripe_client.get_price(price_id)
    except stripe.InvalidRequestError:
        raise HTTPException(status_code=404, detail="Price not found")
    except Exception:
        logger.exception("payments.service.retrieve_price failed price_id=%s", price_id)
        raise HTTPException(status_code=500, detail="Failed to fetch price")

    product = stripe_client.field(price, "product")
    unit_amount = stripe_client.field(price, "unit_amount")
    return {
        "priceId": stripe_client.field(price, "id", price_id),
        "productId": product if isinstance(product, str) else stripe_client.field(product, "id"),
        "product": _price_product(product),
        "unitAmount": unit_amount,
        "currency": stripe_client.field(price, "currency"),
        "price": float(Decimal(unit_amount) / 100) if unit_amount else 0,
    }
