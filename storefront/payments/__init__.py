"""
Module 'payments' (feature-first): point d'entrée public.
Réunit construction du checkout, metadata Stripe, client Stripe, webhook et services.
"""

from .stripe_client import require_stripe, create_session, get_session, parse_event
from .metadata import make_metadata, parse_metadata, extract_metadata, extract_metadata_from_session
from .checkout import to_line_items, build_checkout_request
from .webhook import handle_event
from .service import process_cart_checkout, process_price_checkout, retrieve_session, retrieve_price

__all__ = [
    # stripe
    "require_stripe",
    "create_session",
    "get_session",
    "parse_event",
    # metadata
    "make_metadata",
    "parse_metadata",
    "extract_metadata",
    "extract_metadata_from_session",
    # checkout
    "to_line_items",
    "build_checkout_request",
    # webhook
    "handle_event",
    # services
    "process_cart_checkout",
    "process_price_checkout",
    "retrieve_session",
    "retrieve_price",
]
