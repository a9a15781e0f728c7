"""
Middlewares transverses de la boutique (API JSON consommée par le front).
- register_basic_middlewares: CORS avec cookies, hôtes autorisés, X-Forwarded-*.
- register_security_middleware: en-têtes de sécurité communs à toutes les réponses.
- register_no_cache_middleware: le panier et les sessions de paiement ne sont jamais mis en cache.
- register_force_https_middleware: redirection 301 quand le proxy signale du HTTP.
Le middleware HTTPS est enregistré en dernier par la factory: il s'exécute donc en premier.
"""
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from storefront import config

NO_CACHE_PREFIXES = ("/api/v1/cart", "/api/v1/payments/session")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

# Swagger UI (/docs) charge ses assets depuis ces CDN
DOCS_CDNS = "https://cdn.jsdelivr.net https://unpkg.com"

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "base-uri 'self'",
    "object-src 'none'",
    "frame-ancestors 'none'",
    "img-src 'self' data: https://fastapi.tiangolo.com",
    f"style-src 'self' 'unsafe-inline' {DOCS_CDNS}",
    f"script-src 'self' 'unsafe-inline' {DOCS_CDNS}",
    "connect-src 'self' https://api.stripe.com",
])

def security_headers() -> dict:
    headers = {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "no-referrer",
        "Permissions-Policy": "geolocation=(), microphone=(), camera=(), payment=(self)",
        "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    }
    if config.COOKIE_SECURE:
        headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
    return headers

def register_basic_middlewares(app: FastAPI) -> None:
    """
    CORS (credentials autorisés pour le cookie panier), TrustedHost et en-têtes proxy.
    Avec CORS_ORIGINS="*" (dev), tous les hôtes sont acceptés.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    hosts = list(config.ALLOWED_HOSTS)
    if "*" in config.CORS_ORIGINS:
        hosts.append("*")
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=hosts)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in security_headers().items():
            response.headers.setdefault(name, value)
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    """Le panier détaillé est recalculé à chaque lecture: aucune réponse ne doit être réutilisée."""
    @app.middleware("http")
    async def no_cache_for_cart(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(NO_CACHE_PREFIXES):
            response.headers.update(NO_CACHE_HEADERS)
        return response

def register_force_https_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            return RedirectResponse(str(request.url.replace(scheme="https")), status_code=301)
        return await call_next(request)
