"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from pix_checkout.api.middleware import RequestIDMiddleware, MetricsMiddleware
from pix_checkout.api.v1 import checkout, pix
from pix_checkout.infrastructure.observability.logging import setup_logging
from pix_checkout.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="PIX Checkout",
        description="Cart pricing and PIX BR Code issuing for restaurant orders",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(checkout.router, prefix="/v1", tags=["checkout"])
    app.include_router(pix.router, prefix="/v1", tags=["pix"])

    return app


app = create_app()
