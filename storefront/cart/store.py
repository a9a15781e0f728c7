"""
Persistance du panier brut dans un cookie signé et expirant.

- Jeton: itsdangerous.URLSafeTimedSerializer (JSON signé + horodaté), sel "cart".
- Lecture tolérante: jeton absent, mal signé, expiré ou mal formé => panier vide,
  et chaque élément invalide est ignoré individuellement. load() ne lève jamais.
- Écriture: cookie httponly, path "/", samesite lax, secure en production,
  max_age 7 jours rafraîchi à chaque écriture.
- Dernière écriture gagnante entre onglets: pas de verrou ni de version.
"""
import logging
from typing import Any, List, Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, URLSafeTimedSerializer

from storefront import config
from storefront.cart.models import RawCart, RawCartEntry

logger = logging.getLogger(__name__)

# module storefront.cart.store
def _coerce_entry(it: Any) -> Optional[RawCartEntry]:
    if not isinstance(it, dict):
        return None
    product_id = it.get("productId", it.get("id"))
    quantity = it.get("quantity")
    if not isinstance(product_id, str) or not product_id:
        return None
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        return None
    addons = it.get("selectedAddons")
    if not isinstance(addons, list) or not all(isinstance(a, str) for a in addons):
        addons = []
    return RawCartEntry(product_id=product_id, quantity=int(quantity), selected_addons=addons)


class CartStore:
    def __init__(
        self,
        secret_key: str = config.CART_SECRET_KEY,
        cookie_name: str = config.CART_COOKIE_NAME,
        max_age: int = config.CART_MAX_AGE,
        secure: bool = config.COOKIE_SECURE,
    ):
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure
        self._serializer = URLSafeTimedSerializer(secret_key, salt="cart")

    def dumps(self, cart: RawCart) -> str:
        """Sérialise et signe le panier brut."""
        return self._serializer.dumps([it.to_json() for it in cart])

    def loads(self, token: Optional[str]) -> RawCart:
        """Désérialise un jeton; panier vide si absent, invalide ou expiré."""
        if not token:
            return []
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
        except BadSignature:
            # SignatureExpired hérite de BadSignature
            logger.info("cart.store token rejected (signature/expiry)")
            return []
        except Exception:
            logger.warning("cart.store token unreadable")
            return []
        if not isinstance(payload, list):
            return []
        items: List[RawCartEntry] = []
        for it in payload:
            entry = _coerce_entry(it)
            if entry is not None:
                items.append(entry)
        return items

    def load(self, request: Request) -> RawCart:
        return self.loads(request.cookies.get(self.cookie_name))

    def save(self, response: Response, cart: RawCart) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=self.dumps(cart),
            httponly=True,
            secure=self.secure,
            samesite="lax",
            max_age=self.max_age,
            path="/",
        )


def get_cart_store(request: Request) -> CartStore:
    """Dépendance FastAPI: le store attaché à l'application."""
    return request.app.state.cart_store
