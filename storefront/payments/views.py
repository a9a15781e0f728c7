# module storefront.payments.views
"""Endpoints de paiement.
- /checkout: crée une session Stripe à partir du panier courant (cookie), rate-limité.
- /checkout-prices: session Stripe à partir de prix Stripe existants.
- /webhook: reçoit les événements Stripe signés.
- /session/{session_id}: lecture d'une session (page de succès).
- /prices/{price_id}: prix Stripe et résumé de son produit.
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.cart import service as cart_service
from storefront.cart.store import CartStore, get_cart_store
from storefront.catalog.provider import CatalogProvider, get_catalog
from storefront.payments import service as payments_service
from storefront.payments import stripe_client
from storefront.payments import webhook as payments_webhook
from storefront.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])


@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(
    request: Request,
    store: CartStore = Depends(get_cart_store),
    catalog: CatalogProvider = Depends(get_catalog),
):
    """
    Crée une session Checkout Stripe pour le panier du visiteur.
    Étapes:
      1) Charger le panier brut (cookie) et le résoudre contre le catalogue courant
      2) Construire line_items + metadata (payments.checkout)
      3) Créer la session Stripe et renvoyer {sessionId, url}
    Erreurs: 400 si panier vide, 500 si Stripe non configuré ou en échec.
    Le panier n'est pas modifié (pas de cookie écrit).
    """
    raw = store.load(request)
    detailed = cart_service.detailed_cart(raw, catalog)
    return JSONResponse(payments_service.process_cart_checkout(detailed))


@router.post("/checkout-prices", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_checkout_session_from_prices(request: Request):
    """
    Entrée JSON: {"priceIds": [...], "quantities": [...], "successUrl"?, "cancelUrl"?}
    - 400 si priceIds vide ou quantities de longueur différente / non positives.
    """
    try:
        body: Dict[str, Any] = await request.json()
    except Exception:
        body = {}
    if not isinstance(body, dict):
        body = {}
    price_ids: List[Any] = body.get("priceIds") or []
    quantities: List[Any] = body.get("quantities") or []

    if not isinstance(price_ids, list) or not price_ids or not all(isinstance(p, str) and p for p in price_ids):
        raise HTTPException(status_code=400, detail="Price IDs required")
    if (
        not isinstance(quantities, list)
        or len(quantities) != len(price_ids)
        or not all(isinstance(q, int) and not isinstance(q, bool) and q > 0 for q in quantities)
    ):
        raise HTTPException(status_code=400, detail="Quantities must match price IDs")

    result = payments_service.process_price_checkout(
        price_ids,
        quantities,
        success_url=body.get("successUrl") or None,
        cancel_url=body.get("cancelUrl") or None,
    )
    return JSONResponse(result)


@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request):
    """
    Webhook Stripe.
    - Signature: stripe_client.parse_event (Stripe-Signature + STRIPE_WEBHOOK_SECRET), 400 si invalide
    - Dispatch: payments.webhook.handle_event
    - Réponse: {"received": true, "type": ..., "handled": ...}
    """
    event = await stripe_client.parse_event(request)
    try:
        result = payments_webhook.handle_event(event)
    except Exception:
        logger.exception("Erreur webhook_stripe")
        raise HTTPException(status_code=500, detail="Webhook handler failed")
    return JSONResponse(result)


@router.get("/session/{session_id}")
def get_checkout_session(session_id: str):
    """Session Checkout Stripe (payment_intent étendu) pour la page de confirmation."""
    return JSONResponse({"session": payments_service.retrieve_session(session_id)})


@router.get("/prices/{price_id}")
def get_price(price_id: str):
    """Prix Stripe (produit étendu): 404 si inconnu, 500 si Stripe échoue."""
    return JSONResponse(payments_service.retrieve_price(price_id))
