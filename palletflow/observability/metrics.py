"""Prometheus metrics utilities."""

from __future__ import annotations

from typing import Iterable

from prometheus_client import CollectorRegistry, Counter, Histogram

from palletflow.enterprise.core import Accepted, Outcome

metrics_registry = CollectorRegistry()

REQUEST_COUNTER = Counter(
    "palletflow_api_requests_total",
    "Total number of API requests handled",
    registry=metrics_registry,
)

PACKAGE_OUTCOME_COUNTER = Counter(
    "palletflow_package_outcomes_total",
    "Per-package results of induction and stow batches",
    labelnames=("operation", "result"),
    registry=metrics_registry,
)

PALLETS_OPENED_COUNTER = Counter(
    "palletflow_pallets_opened_total",
    "Pallet rows created by the stow engine",
    registry=metrics_registry,
)

BATCH_DURATION = Histogram(
    "palletflow_batch_seconds",
    "Duration of induction and stow batches",
    labelnames=("operation",),
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
    registry=metrics_registry,
)


def record_batch_outcomes(operation: str, outcomes: Iterable[Outcome]) -> None:
    """Count each outcome under its failure kind, or ``accepted``."""

    for outcome in outcomes:
        result = "accepted" if isinstance(outcome, Accepted) else outcome.kind.value
        PACKAGE_OUTCOME_COUNTER.labels(operation=operation, result=result).inc()


def record_pallet_opened() -> None:
    PALLETS_OPENED_COUNTER.inc()
