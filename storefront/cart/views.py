# module storefront.cart.views
"""Endpoints du panier (consommés par le front de la boutique).
- GET    /api/v1/cart: panier détaillé courant.
- POST   /api/v1/cart: ajout / incrément {productId, quantity=1, selectedAddons=[]}.
- PUT    /api/v1/cart: quantité exacte {productId, quantity} ou add-ons {productId, selectedAddons}.
- PUT    /api/v1/cart/addons: remplace les add-ons {productId, selectedAddons}.
- DELETE /api/v1/cart?productId=...: retire une ligne; ?all=1 vide le panier.
Chaque mutation lit le cookie une fois, applique une fonction pure, réécrit le cookie
(expiration rafraîchie) et renvoie le panier détaillé résultant.
Payload invalide: 400 « Invalid payload », panier inchangé (pas de cookie écrit).
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from storefront.cart import service as cart_service
from storefront.cart.models import RawCart
from storefront.cart.store import CartStore, get_cart_store
from storefront.catalog.provider import CatalogProvider, get_catalog

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])

def _invalid(detail: str = "Invalid payload") -> HTTPException:
    return HTTPException(status_code=400, detail=detail)

async def _read_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except Exception:
        return {}
    return body if isinstance(body, dict) else {}

def _product_id(body: Dict[str, Any]) -> str:
    product_id = body.get("productId")
    if not isinstance(product_id, str) or not product_id.strip():
        raise _invalid()
    return product_id.strip()

def _quantity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid()
    if isinstance(value, float) and not value.is_integer():
        raise _invalid()
    return int(value)

def _addons(value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(a, str) for a in value):
        raise _invalid("selectedAddons must be an array")
    return list(value)

def _set_cart_and_respond(store: CartStore, raw: RawCart, catalog: CatalogProvider) -> JSONResponse:
    detail = cart_service.detailed_cart(raw, catalog)
    response = JSONResponse(detail.to_json())
    store.save(response, raw)
    return response


@router.get("")
def get_cart(request: Request, store: CartStore = Depends(get_cart_store), catalog: CatalogProvider = Depends(get_catalog)):
    """Panier détaillé courant (recalculé à chaque lecture, cookie non réécrit)."""
    raw = store.load(request)
    return JSONResponse(cart_service.detailed_cart(raw, catalog).to_json())


@router.post("")
async def add_to_cart(request: Request, store: CartStore = Depends(get_cart_store), catalog: CatalogProvider = Depends(get_catalog)):
    """Ajoute un produit ou fusionne avec sa ligne (voir engine.add_or_increment)."""
    body = await _read_body(request)
    product_id = _product_id(body)
    quantity = _quantity(body.get("quantity", 1))
    selected_addons = _addons(body.get("selectedAddons", []))

    raw = store.load(request)
    updated = cart_service.add_to_cart(raw, catalog, product_id, quantity, selected_addons)
    return _set_cart_and_respond(store, updated, catalog)


@router.put("")
async def update_cart(request: Request, store: CartStore = Depends(get_cart_store), catalog: CatalogProvider = Depends(get_catalog)):
    """
    Mise à jour d'une ligne.
    - {productId, quantity}: quantité exacte (<= 0 supprime, ligne absente créée).
    - {productId, selectedAddons}: remplace les add-ons.
    - Les deux champs ensemble: quantité puis add-ons (no-op si la ligne a été supprimée).
    Tout est validé avant de toucher au panier.
    """
    body = await _read_body(request)
    product_id = _product_id(body)
    has_quantity = "quantity" in body
    has_addons = "selectedAddons" in body
    if not has_quantity and not has_addons:
        raise _invalid()
    quantity = _quantity(body.get("quantity")) if has_quantity else None
    selected_addons = _addons(body.get("selectedAddons")) if has_addons else None

    updated = store.load(request)
    if quantity is not None:
        updated = cart_service.update_quantity(updated, product_id, quantity)
    if selected_addons is not None:
        updated = cart_service.update_addons(updated, product_id, selected_addons)
    return _set_cart_and_respond(store, updated, catalog)


@router.put("/addons")
async def update_cart_addons(request: Request, store: CartStore = Depends(get_cart_store), catalog: CatalogProvider = Depends(get_catalog)):
    """Remplace la sélection d'add-ons d'une ligne existante (no-op si absente)."""
    body = await _read_body(request)
    product_id = _product_id(body)
    selected_addons = _addons(body.get("selectedAddons"))

    raw = store.load(request)
    updated = cart_service.update_addons(raw, product_id, selected_addons)
    return _set_cart_and_respond(store, updated, catalog)


@router.delete("")
def delete_from_cart(
    request: Request,
    product_id: Optional[str] = Query(default=None, alias="productId"),
    clear_all: Optional[str] = Query(default=None, alias="all"),
    store: CartStore = Depends(get_cart_store),
    catalog: CatalogProvider = Depends(get_catalog),
):
    """Retire une ligne (?productId=...) ou vide le panier (?all=1)."""
    raw = store.load(request)
    if clear_all == "1":
        return _set_cart_and_respond(store, cart_service.clear_cart(raw), catalog)
    if not product_id:
        raise HTTPException(status_code=400, detail="productId required")
    updated = cart_service.remove_from_cart(raw, product_id)
    return _set_cart_and_respond(store, updated, catalog)
