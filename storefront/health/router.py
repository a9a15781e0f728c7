from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storefront import config
from storefront.catalog.provider import CatalogProvider, get_catalog
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/stripe")
def health_stripe(request: Request, catalog: CatalogProvider = Depends(get_catalog)):
    """Configuration Stripe (sans secrets), état du cache catalogue et du rate limiting."""
    return JSONResponse({
        "stripe_configured": bool(config.STRIPE_SECRET_KEY),
        "webhook_configured": bool(config.STRIPE_WEBHOOK_SECRET),
        "currency": config.CURRENCY,
        "catalog": catalog.cache_info(),
        "rate_limit": rate_limit_health_info(request),
    })
