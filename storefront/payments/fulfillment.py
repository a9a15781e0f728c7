# module storefront.payments.fulfillment
"""Point de remise des commandes confirmées.
L'exécution réelle (stockage, e-mail, vidage du panier) est hors périmètre:
la commande est seulement journalisée.
"""
import logging

from storefront.payments.models import Order

logger = logging.getLogger(__name__)

def fulfill_order(order: Order) -> None:
    logger.info(
        "Order completed session_id=%s payment_status=%s amount_total=%s lines=%s",
        order.session_id,
        order.payment_status,
        order.amount_total,
        [line.model_dump(by_alias=True) for line in order.lines],
    )
