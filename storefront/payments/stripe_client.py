"""
Seul module qui parle au SDK Stripe: configuration de la clé, sessions Checkout,
prix, produits du catalogue et vérification des webhooks.
Les autres modules reçoivent des dicts ou des StripeObject lus via field().
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

import stripe
from fastapi import HTTPException, Request

from storefront import config

logger = logging.getLogger(__name__)

# module storefront.payments.stripe_client
def is_configured() -> bool:
    return bool(config.STRIPE_SECRET_KEY)

def require_stripe():
    """
    Configure le SDK (clé secrète, relances réseau) et le retourne.
    HTTPException(500) « Stripe non configuré » si STRIPE_SECRET_KEY est vide.
    """
    if not config.STRIPE_SECRET_KEY:
        raise HTTPException(status_code=500, detail="Stripe non configuré")
    stripe.api_key = config.STRIPE_SECRET_KEY
    stripe.max_network_retries = config.STRIPE_MAX_RETRIES
    return stripe

def field(obj: Any, key: str, default: Any = None) -> Any:
    """Lecture tolérante d'un champ sur un dict ou un StripeObject."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        value = obj.get(key, default)
    else:
        value = getattr(obj, key, default)
    return default if value is None else value

def to_plain(obj: Any) -> Dict[str, Any]:
    """Convertit un objet Stripe en dict (les dicts sont renvoyés tels quels)."""
    if obj is None:
        return {}
    if type(obj) is dict:
        return obj
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return dict(obj)

def create_session(
    *,
    line_items: List[Dict[str, Any]],
    mode: str,
    success_url: str,
    cancel_url: str,
    metadata: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    stripe.checkout.Session.create en mode carte.
    La metadata (cart_version, cart_items...) n'est envoyée que si elle est non vide.
    Retour: la session sous forme de dict (id, url, ...).
    """
    require_stripe()
    params: Dict[str, Any] = {
        "line_items": line_items,
        "mode": mode,
        "success_url": success_url,
        "cancel_url": cancel_url,
        "payment_method_types": ["card"],
    }
    if metadata:
        params["metadata"] = metadata
    session = stripe.checkout.Session.create(**params)
    return to_plain(session)

def get_session(session_id: str, expand: Optional[List[str]] = None) -> Dict[str, Any]:
    """Session Checkout par identifiant, champs `expand` optionnels (ex: payment_intent)."""
    require_stripe()
    if expand:
        session = stripe.checkout.Session.retrieve(session_id, expand=expand)
    else:
        session = stripe.checkout.Session.retrieve(session_id)
    return to_plain(session)

def get_price(price_id: str) -> Dict[str, Any]:
    """Récupère un prix Stripe (avec son produit) par identifiant."""
    require_stripe()
    price = stripe.Price.retrieve(price_id, expand=["product"])
    return to_plain(price)

def list_active_products():
    """Itère sur tous les produits actifs (pagination automatique, default_price étendu)."""
    require_stripe()
    page = stripe.Product.list(active=True, expand=["data.default_price"], limit=100)
    return page.auto_paging_iter()

async def parse_event(request: Request):
    """
    Vérifie la signature Stripe du corps brut et retourne l'événement.
    En-tête Stripe-Signature absent, secret non configuré, corps illisible ou
    signature fausse: HTTPException(400) « Invalid signature ».
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    if not sig_header or not config.STRIPE_WEBHOOK_SECRET:
        logger.warning("payments.webhook rejected: signature header or secret missing")
        raise HTTPException(status_code=400, detail="Invalid signature")
    try:
        return stripe.Webhook.construct_event(payload, sig_header, config.STRIPE_WEBHOOK_SECRET)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning("payments.webhook signature verification failed: %s", e)
        raise HTTPException(status_code=400, detail="Invalid signature")
