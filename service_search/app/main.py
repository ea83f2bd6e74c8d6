"""Search gateway main application."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .api.routes import router as api_router
from .errors import GatewayError
from .pipelines import IngestionPipeline, QueryPipeline
from libs.common.config import GatewayConfig
from libs.common.logging import configure_logging
from libs.common.metrics import get_metrics_collector
from libs.search_engine.base import SearchEngineClient
from libs.search_engine.factory import connect_with_retry

logger = structlog.get_logger("search_gateway")

SERVICE_NAME = "search-gateway"
SERVICE_VERSION = "0.1.0"
UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    """Route template for metric labels; unknown paths share one bucket."""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


def create_app(
    config: Optional[GatewayConfig] = None,
    engine: Optional[SearchEngineClient] = None
) -> FastAPI:
    """Build the gateway application.

    Parameters
    - config: Settings to use; read from the environment when omitted
    - engine: Already-connected engine client. When omitted, the lifespan
      connects (retrying until the engine answers) and closes it on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        settings = config or GatewayConfig()
        configure_logging(SERVICE_NAME, settings.ds_log_level, settings.ds_log_format)
        logger.info("Starting search gateway", env=settings.ds_env)

        metrics_collector = get_metrics_collector(SERVICE_NAME)
        owns_engine = engine is None
        engine_client = engine or await connect_with_retry(settings, metrics=metrics_collector)

        app.state.engine = engine_client
        app.state.metrics_collector = metrics_collector
        app.state.ingestion_pipeline = IngestionPipeline(
            engine_client,
            settings.ds_opensearch_index,
            metrics=metrics_collector
        )
        app.state.query_pipeline = QueryPipeline(
            engine_client,
            settings.ds_opensearch_index,
            metrics=metrics_collector
        )

        logger.info("Search gateway started", index=settings.ds_opensearch_index)

        yield

        logger.info("Shutting down search gateway")
        if owns_engine:
            await engine_client.close()
        logger.info("Search gateway shutdown complete")

    app = FastAPI(
        title="Search Gateway",
        description="Bulk document ingestion and fuzzy multi-field search",
        version=SERVICE_VERSION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """Render taxonomy errors as ``{"error": message}``."""
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect metrics for HTTP requests."""
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.exception("Unhandled error", path=request.url.path, error=str(e))
            status_code = 500
            response = JSONResponse(
                status_code=500,
                content={"error": "Something went wrong"}
            )

        if hasattr(app.state, "metrics_collector"):
            app.state.metrics_collector.record_http_request(
                method=request.method,
                endpoint=route_label(request),
                status=status_code,
                duration=time.time() - start_time
            )

        return response

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        if hasattr(app.state, 'engine') and await app.state.engine.health_check():
            return {"status": "healthy", "service": SERVICE_NAME}
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "service": SERVICE_NAME}
        )

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        if hasattr(app.state, 'metrics_collector'):
            metrics_data = app.state.metrics_collector.get_metrics()
            return Response(content=metrics_data, media_type="text/plain")
        return Response(content="# No metrics available\n", media_type="text/plain")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "metrics": "/metrics",
                "documents": "/documents",
                "search": "/search"
            }
        }

    return app


app = create_app()


def main() -> None:
    config = GatewayConfig()
    uvicorn.run(
        "service_search.app.main:app",
        host=config.ds_gateway_host,
        port=config.ds_gateway_port,
        log_level=config.ds_log_level.lower()
    )


if __name__ == "__main__":
    main()
