"""
Sérialisation/désérialisation des métadonnées Stripe du panier.

Format (version "1"):
- cart_version: "1"
- cart_items: JSON compact [{"productId", "quantity", "selectedAddons"}, ...]
Stripe limite chaque valeur à 500 caractères: au-delà, le JSON est découpé en
cart_items_0..cart_items_{n-1} avec cart_items_chunks = n.
La metadata revient de Stripe: elle est traitée comme non fiable et validée.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from pydantic import TypeAdapter, ValidationError

from storefront.cart.models import DetailedCart
from storefront.payments.models import OrderLine
from storefront.payments.stripe_client import field

logger = logging.getLogger(__name__)

METADATA_VERSION = "1"
MAX_VALUE_LENGTH = 500
# 50 clés max côté Stripe, on garde de la marge pour les autres clés
MAX_CHUNKS = 40

_LINES = TypeAdapter(List[OrderLine])

# module storefront.payments.metadata
def cart_summary(detailed_cart: DetailedCart) -> List[Dict[str, Any]]:
    return [
        {
            "productId": it.product.id,
            "quantity": it.quantity,
            "selectedAddons": list(it.selected_addons),
        }
        for it in detailed_cart.items
    ]

def make_metadata(detailed_cart: DetailedCart) -> Dict[str, str]:
    """
    Construit la metadata de session à partir du panier détaillé.
    - Soulève HTTPException(400) si le panier dépasse la capacité de la metadata.
    """
    payload = json.dumps(cart_summary(detailed_cart), separators=(",", ":"))
    metadata = {"cart_version": METADATA_VERSION}
    if len(payload) <= MAX_VALUE_LENGTH:
        metadata["cart_items"] = payload
        return metadata

    chunks = [payload[i:i + MAX_VALUE_LENGTH] for i in range(0, len(payload), MAX_VALUE_LENGTH)]
    if len(chunks) > MAX_CHUNKS:
        raise HTTPException(status_code=400, detail="Panier trop volumineux")
    metadata["cart_items_chunks"] = str(len(chunks))
    for idx, chunk in enumerate(chunks):
        metadata[f"cart_items_{idx}"] = chunk
    return metadata

def _reassemble(metadata: Any) -> Optional[str]:
    single = field(metadata, "cart_items")
    if single:
        return single
    try:
        count = int(field(metadata, "cart_items_chunks", 0))
    except (TypeError, ValueError):
        return None
    if count <= 0 or count > MAX_CHUNKS:
        return None
    parts = []
    for idx in range(count):
        part = field(metadata, f"cart_items_{idx}")
        if not isinstance(part, str):
            return None
        parts.append(part)
    return "".join(parts)

def parse_metadata(metadata: Any) -> Optional[List[OrderLine]]:
    """
    Reconstitue les lignes achetées depuis la metadata.
    - Version absente: format historique identique, accepté.
    - Retourne None si version inconnue, JSON invalide ou lignes mal formées.
    """
    version = field(metadata, "cart_version", METADATA_VERSION)
    if str(version) != METADATA_VERSION:
        logger.warning("payments.metadata unsupported cart_version=%s", version)
        return None
    raw = _reassemble(metadata)
    if not raw:
        return None
    try:
        return _LINES.validate_python(json.loads(raw))
    except (ValueError, ValidationError):
        logger.warning("payments.metadata invalid cart_items payload")
        return None

def extract_metadata(event: Any) -> Optional[List[OrderLine]]:
    """Lignes depuis un event webhook (event.data.object.metadata)."""
    session = field(field(event, "data"), "object")
    return extract_metadata_from_session(session)

def extract_metadata_from_session(session: Any) -> Optional[List[OrderLine]]:
    """Lignes depuis une session Checkout (session.metadata)."""
    return parse_metadata(field(session, "metadata", {}))
