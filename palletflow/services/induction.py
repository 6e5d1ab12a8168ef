"""Induction: recording the physical arrival of packages at a warehouse."""

from __future__ import annotations

import time
from typing import Dict, List, Sequence

import structlog

from palletflow.enterprise.core import (
    Accepted,
    FailureKind,
    LifecycleRules,
    Outcome,
    Package,
    PackageStatus,
    Rejected,
)
from palletflow.observability.metrics import BATCH_DURATION, record_batch_outcomes
from palletflow.observability.tracing import get_tracer
from palletflow.persistence import RecordStore, StorageError

logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)

NOT_FOUND_MESSAGE = "Package ID not found"
SERVER_ERROR_MESSAGE = "Server Error"


class InductionEngine:
    """Moves PENDING packages owned by a client to INDUCTED.

    Every requested id gets exactly one outcome, in request order. Items are
    independent: a failure never blocks or rolls back another item.
    """

    def __init__(self, store: RecordStore, rules: LifecycleRules) -> None:
        self.store = store
        self.rules = rules

    async def induct(self, package_ids: Sequence[str], client_id: str, warehouse_id: str) -> List[Outcome]:
        started = time.perf_counter()
        with tracer.start_as_current_span("induct_packages") as span:
            span.set_attribute("palletflow.batch_size", len(package_ids))
            span.set_attribute("palletflow.warehouse_id", warehouse_id)
            outcomes = await self._induct(package_ids, client_id, warehouse_id)

        BATCH_DURATION.labels(operation="induct").observe(time.perf_counter() - started)
        record_batch_outcomes("induct", outcomes)
        logger.info(
            "induction_batch_finished",
            client_id=client_id,
            warehouse_id=warehouse_id,
            requested=len(package_ids),
            inducted=sum(1 for outcome in outcomes if outcome.success),
        )
        return outcomes

    async def _induct(self, package_ids: Sequence[str], client_id: str, warehouse_id: str) -> List[Outcome]:
        try:
            found = await self.store.packages_by_ids(package_ids)
        except StorageError as exc:
            logger.error("induction_fetch_failed", error=str(exc), requested=len(package_ids))
            return [Rejected(pid, FailureKind.STORAGE_ERROR, SERVER_ERROR_MESSAGE) for pid in package_ids]

        packages: Dict[str, Package] = {pkg.id: pkg for pkg in found}
        outcomes: List[Outcome] = []
        for package_id in package_ids:
            outcome = await self._induct_one(packages.get(package_id), package_id, client_id, warehouse_id)
            if isinstance(outcome, Accepted):
                packages[package_id] = packages[package_id].model_copy(
                    update={"status": PackageStatus.INDUCTED, "warehouse_id": warehouse_id}
                )
            outcomes.append(outcome)
        return outcomes

    async def _induct_one(
        self,
        package: Package | None,
        package_id: str,
        client_id: str,
        warehouse_id: str,
    ) -> Outcome:
        # Packages owned by another client are reported exactly like missing ones.
        if package is None or package.client_id != client_id:
            return Rejected(package_id, FailureKind.NOT_FOUND_OR_FOREIGN, NOT_FOUND_MESSAGE)

        if not self.rules.allows(package.status, PackageStatus.INDUCTED):
            return Rejected(
                package_id,
                FailureKind.INVALID_STATE,
                f"Package status is {package.status.value}, "
                f"only {PackageStatus.PENDING.value} packages can be {PackageStatus.INDUCTED.value}",
            )

        if self.rules.exceeds_cap(package.weight_lbs):
            return Rejected(
                package_id,
                FailureKind.OVER_WEIGHT_LIMIT,
                f"Package weight of {package.weight_lbs:g} exceeds weight limit "
                f"of {self.rules.max_pallet_weight_lbs:g} lbs",
            )

        try:
            await self.store.update_package(
                package_id,
                status=PackageStatus.INDUCTED,
                warehouse_id=warehouse_id,
                received_ts=self.store.now(),
            )
        except StorageError as exc:
            logger.error("package_induction_failed", package_id=package_id, error=str(exc))
            return Rejected(package_id, FailureKind.STORAGE_ERROR, SERVER_ERROR_MESSAGE)

        return Accepted(package_id, f"Package {PackageStatus.INDUCTED.value} successfully")
