"""Prometheus exposition endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from palletflow.observability.metrics import metrics_registry

router = APIRouter(prefix="/observability", tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    return Response(generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)
