"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finrec.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finrec.api.v1 import debt, planning, recommendations
from finrec.infrastructure.observability.logging import setup_logging
from finrec.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Financial Recommendation Engine",
        description="Health score, debt payoff plans, surplus allocation, goal forecasts and emergency preparedness",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(recommendations.router, prefix="/v1", tags=["recommendations"])
    app.include_router(debt.router, prefix="/v1", tags=["debt"])
    app.include_router(planning.router, prefix="/v1", tags=["planning"])

    return app


app = create_app()
