"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from layby_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from layby_gateway.api.v1 import bookings, history, payment_plan, plan
from layby_gateway.infrastructure.observability.logging import setup_logging
from layby_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Lay-by Gateway",
        description="Flight payment plan calculator and booking service",
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

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(payment_plan.router, prefix="/v1", tags=["payment plans"])
    app.include_router(bookings.router, prefix="/v1", tags=["bookings"])
    app.include_router(history.router, prefix="/v1", tags=["bookings"])
    app.include_router(plan.router, prefix="/v1", tags=["plans"])

    return app


app = create_app()
