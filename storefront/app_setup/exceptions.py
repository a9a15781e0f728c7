"""
Gestionnaires d’exceptions.
- HTTPException: corps JSON {"detail": ...} pour tous les clients (API JSON uniquement).
- Exception non gérée: 500 JSON générique, trace journalisée.
"""
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers HTTPException et Exception.
    - Les en-têtes portés par l'exception (ex: Retry-After du rate limiter) sont conservés.
    """
    @app.exception_handler(HTTPException)
    async def json_http_exception(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def json_unhandled_exception(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
