# module storefront.catalog.views
"""Endpoints publics du catalogue (vitrine de la boutique).
- GET /api/v1/catalog/products: produits actifs (snapshot en cache, TTL).
- GET /api/v1/catalog/products/{product_id}: un produit, 404 si introuvable.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from storefront.catalog.provider import CatalogProvider, get_catalog

router = APIRouter(prefix="/api/v1/catalog", tags=["Catalog API"])

@router.get("/products")
def list_products(catalog: CatalogProvider = Depends(get_catalog)):
    products = catalog.get_products()
    return JSONResponse([p.model_dump(mode="json") for p in products])

@router.get("/products/{product_id}")
def get_product(product_id: str, catalog: CatalogProvider = Depends(get_catalog)):
    product = catalog.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return JSONResponse(product.model_dump(mode="json"))
