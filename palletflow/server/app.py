"""FastAPI application exposing the package lifecycle operations."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from palletflow.enterprise.config.settings import get_settings
from palletflow.observability import bind_global_context, configure_logging, configure_tracer
from palletflow.observability.metrics import REQUEST_COUNTER
from palletflow.persistence import StorageError, create_schema, dispose_engine, init_engine, seed_store
from palletflow.server.api.routers import (
	clients_router,
	health_router,
	observability_router,
	packages_router,
	pallets_router,
	warehouses_router,
)
from palletflow.server.dependencies import get_repository_context

settings = get_settings()
configure_logging(settings.logging)
configure_tracer("palletflow-api", settings.telemetry.otlp_endpoint)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
	current = get_settings()
	bind_global_context(service="palletflow-api", environment=current.environment)
	if current.database.enabled:
		engine = init_engine(current)
		if current.database.create_schema:
			await create_schema(engine)
	async with get_repository_context() as repo:
		await seed_store(repo, current.seed)
	logger.info("api_started", environment=current.environment, database=current.database.enabled)
	yield
	await dispose_engine()


app = FastAPI(title="Palletflow API", version="1.0.0", lifespan=lifespan)

FastAPIInstrumentor.instrument_app(app)


@app.middleware("http")
async def count_requests(request: Request, call_next):
	REQUEST_COUNTER.inc()
	return await call_next(request)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
	logger.error("storage_error", path=request.url.path, error=str(exc))
	return JSONResponse(
		status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
		content={"detail": "Record store unavailable"},
	)


app.include_router(health_router, prefix="/api/v1")
app.include_router(packages_router, prefix="/api/v1")
app.include_router(pallets_router, prefix="/api/v1")
app.include_router(clients_router, prefix="/api/v1")
app.include_router(warehouses_router, prefix="/api/v1")
if settings.telemetry.metrics_enabled:
	app.include_router(observability_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, str]:
	return {"message": "Palletflow API"}
