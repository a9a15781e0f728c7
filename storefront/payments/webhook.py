"""
Traitement des événements Stripe déjà vérifiés (signature validée par stripe_client.parse_event).

États: Unverified -> Verified. Seul un événement vérifié arrive ici; un échec de
signature est rejeté en amont (400), sans relance ni effet de bord.
Dispatch par type:
- checkout.session.completed: metadata validée -> Order -> fulfillment.fulfill_order
- payment_intent.succeeded / payment_intent.payment_failed: journalisés
- autres types: acceptés et ignorés (compatibilité ascendante)
"""
import logging
from typing import Any, Dict

from storefront.payments import fulfillment
from storefront.payments import metadata as payments_metadata
from storefront.payments.models import Order
from storefront.payments.stripe_client import field

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"

# module storefront.payments.webhook
def order_from_session(session: Any) -> Order | None:
    """Construit l'Order depuis une session Checkout; None si la metadata est invalide."""
    lines = payments_metadata.extract_metadata_from_session(session)
    if lines is None:
        return None
    customer_details = field(session, "customer_details", {})
    return Order(
        session_id=field(session, "id", ""),
        payment_status=field(session, "payment_status"),
        customer_email=field(customer_details, "email"),
        amount_total=field(session, "amount_total"),
        currency=field(session, "currency"),
        lines=lines,
    )

def handle_event(event: Any) -> Dict[str, Any]:
    """
    Dispatch d'un événement vérifié.
    Retour: {"received": True, "type": <type>, "handled": <bool>}
    """
    event_type = field(event, "type", "")
    obj = field(field(event, "data"), "object", {})
    handled = False

    if event_type == CHECKOUT_COMPLETED:
        order = order_from_session(obj)
        if order is None:
            logger.warning("payments.webhook checkout completed without valid cart metadata session_id=%s", field(obj, "id"))
        else:
            fulfillment.fulfill_order(order)
            handled = True
    elif event_type == PAYMENT_SUCCEEDED:
        logger.info("Payment succeeded: %s", field(obj, "id"))
        handled = True
    elif event_type == PAYMENT_FAILED:
        logger.warning("Payment failed: %s", field(obj, "id"))
        handled = True
    else:
        logger.info("Unhandled event type: %s", event_type)

    return {"received": True, "type": event_type, "handled": handled}
