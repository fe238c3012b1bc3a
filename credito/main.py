"""
Credit Evaluation Services

FastAPI applications for three cooperating microservices:

- Client Directory (clientes_app): CRUD registry of clients keyed by CPF
- Card Directory (cartoes_app): registry of cards, queried by income and by CPF
- Credit Evaluator (avaliador_app): composes a client's credit situation
  from the two directories over HTTP

Each service runs as its own process, e.g.:

    uvicorn credito.main:clientes_app --port 8001
    uvicorn credito.main:cartoes_app --port 8002
    uvicorn credito.main:avaliador_app --port 8003

All three share request tracing, structured logging, Prometheus metrics,
the health endpoint and the mapping of domain errors to HTTP responses.
"""
import time
from contextlib import asynccontextmanager
from typing import Optional, Sequence

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy import Table
from starlette.responses import Response

from credito import __version__, metrics
from credito.api import avaliador_router, cartoes_router, clientes_router
from credito.config import settings
from credito.database import create_tables
from credito.exceptions import (
    ClienteNotFoundError,
    DuplicateCpfError,
    PeerCommunicationError,
)
from credito.logging import (
    configure_logging,
    get_logger,
    set_request_context,
    clear_request_context,
    generate_request_id,
    TimedOperation,
)
from credito.models import Cartao, Cliente

# Configure structured logging
configure_logging()
logger = get_logger(__name__)


def create_app(
    service_name: str,
    title: str,
    routers: Sequence[APIRouter],
    tables: Optional[Sequence[Table]] = None,
) -> FastAPI:
    """
    Build one service application.

    Args:
        service_name: Name used in logs, metrics and the health endpoint
        title: OpenAPI title
        routers: Routers mounted by this service
        tables: Tables owned by this service, created on startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("service_starting", service_name=service_name)

        if tables:
            with TimedOperation("create_tables", logger, service_name=service_name):
                create_tables(tables)

        logger.info("service_started", service_name=service_name)

        yield

        logger.info("service_stopping", service_name=service_name)

    app = FastAPI(title=title, version=__version__, lifespan=lifespan)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        """
        Middleware for request tracing, logging, and metrics.

        Sets up request context with:
        - request_id: Unique identifier for tracing, reused from X-Request-ID
        - Timing for duration_ms calculation
        - Prometheus metrics collection
        """
        method = request.method
        path = request.url.path

        # Skip logging/metrics for health and metrics endpoints
        if path in ("/health", "/metrics"):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_context(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()

        logger.info("request_received", service=service_name, method=method, path=path)

        try:
            response = await call_next(request)

            duration_seconds = time.perf_counter() - start_time

            logger.info(
                "request_completed",
                service=service_name,
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_seconds * 1000, 2),
            )

            metrics.record_http_request(
                service_name, method, path, response.status_code, duration_seconds
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.error(
                "request_failed",
                service=service_name,
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error=str(e),
            )

            metrics.record_http_request(service_name, method, path, 500)
            raise

        finally:
            clear_request_context()

    @app.exception_handler(ClienteNotFoundError)
    async def cliente_not_found_handler(request: Request, exc: ClienteNotFoundError):
        """Handle an absent client."""
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(DuplicateCpfError)
    async def duplicate_cpf_handler(request: Request, exc: DuplicateCpfError):
        """Handle a CPF that is already registered."""
        logger.warning("cliente_duplicate_cpf", cpf=exc.cpf, outcome="conflict")
        return JSONResponse(status_code=409, content={"message": exc.message})

    @app.exception_handler(PeerCommunicationError)
    async def peer_communication_error_handler(request: Request, exc: PeerCommunicationError):
        """Handle a peer service that could not be reached or failed."""
        logger.error(
            "peer_communication_error",
            status_code=exc.status_code,
            detail=exc.message,
        )
        return JSONResponse(
            status_code=502,
            content={"message": exc.message, "status_code": exc.status_code},
        )

    for router in routers:
        app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {"status": "ok", "service": service_name}

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    return app


clientes_app = create_app(
    service_name=f"{settings.service_name}-clientes",
    title="Client Directory",
    routers=[clientes_router],
    tables=[Cliente.__table__],
)

cartoes_app = create_app(
    service_name=f"{settings.service_name}-cartoes",
    title="Card Directory",
    routers=[cartoes_router],
    tables=[Cartao.__table__],
)

avaliador_app = create_app(
    service_name=f"{settings.service_name}-avaliador",
    title="Credit Evaluator",
    routers=[avaliador_router],
)


if __name__ == "__main__":
    import argparse

    import uvicorn

    apps = {"clientes": clientes_app, "cartoes": cartoes_app, "avaliador": avaliador_app}

    parser = argparse.ArgumentParser(description="Run one of the credit services")
    parser.add_argument("service", choices=sorted(apps))
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    uvicorn.run(apps[args.service], host=args.host, port=args.port)
