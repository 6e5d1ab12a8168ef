"""Stowing: assigning inducted packages to weight-capped pallets.

Packages are packed greedily. The batch is first ordered by service date and
then weight, so packages shipping around the same day end up on the same
pallet regardless of the order the caller listed them in. A pallet that
cannot take the next package is closed for the rest of the batch and a new
one is opened. Outcomes are reported back in the caller's order.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from palletflow.enterprise.core import (
    Accepted,
    FailureKind,
    LifecycleRules,
    Outcome,
    Package,
    PackageStatus,
    Pallet,
    Rejected,
)
from palletflow.observability.metrics import BATCH_DURATION, record_batch_outcomes, record_pallet_opened
from palletflow.observability.tracing import get_tracer
from palletflow.persistence import RecordStore, StorageError

logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)

NOT_FOUND_MESSAGE = "Package not found"
STOW_ERROR_MESSAGE = "Server error while attempt to STOW package"
PALLET_SETUP_ERROR_MESSAGE = "Server error while attempt INSERT or UPDATE pallet"


def _new_pallet_id() -> str:
    return str(uuid.uuid4())


@dataclass
class _OpenPallet:
    """The pallet currently receiving packages and the weight already on it."""

    id: str
    weight_lbs: float = 0.0


class StowEngine:
    """Moves INDUCTED packages to STOWED by placing them on pallets."""

    def __init__(
        self,
        store: RecordStore,
        rules: LifecycleRules,
        id_factory: Callable[[], str] = _new_pallet_id,
    ) -> None:
        self.store = store
        self.rules = rules
        self.id_factory = id_factory

    async def stow(
        self,
        package_ids: Sequence[str],
        warehouse_id: str,
        pallet_id: Optional[str] = None,
    ) -> List[Outcome]:
        """Stow ``package_ids`` in ``warehouse_id``, starting on ``pallet_id``.

        Returns one outcome per requested id in request order, or a single
        :attr:`FailureKind.PRE_CREATION_ABORT` outcome when the starting pallet
        could not be read or written.
        """

        started = time.perf_counter()
        with tracer.start_as_current_span("stow_packages") as span:
            span.set_attribute("palletflow.batch_size", len(package_ids))
            span.set_attribute("palletflow.warehouse_id", warehouse_id)
            outcomes = await self._stow(package_ids, warehouse_id, pallet_id)

        BATCH_DURATION.labels(operation="stow").observe(time.perf_counter() - started)
        record_batch_outcomes("stow", outcomes)
        logger.info(
            "stow_batch_finished",
            warehouse_id=warehouse_id,
            requested=len(package_ids),
            stowed=sum(1 for outcome in outcomes if outcome.success),
            pallets=sorted({outcome.pallet_id for outcome in outcomes if outcome.success}),
        )
        return outcomes

    async def _stow(
        self,
        package_ids: Sequence[str],
        warehouse_id: str,
        pallet_id: Optional[str],
    ) -> List[Outcome]:
        try:
            found = await self.store.packages_by_ids(package_ids)
        except StorageError as exc:
            logger.error("stow_fetch_failed", error=str(exc), requested=len(package_ids))
            return [Rejected(pid, FailureKind.STORAGE_ERROR, STOW_ERROR_MESSAGE) for pid in package_ids]

        # Work on a sorted copy; the caller's order is restored below.
        packing_order = sorted(found, key=Package.stow_order_key)

        attempted_id = pallet_id or self.id_factory()
        try:
            current = await self._starting_pallet(attempted_id, warehouse_id, reuse=pallet_id is not None)
        except StorageError as exc:
            logger.error("pallet_setup_failed", pallet_id=attempted_id, error=str(exc))
            return [Rejected(None, FailureKind.PRE_CREATION_ABORT, PALLET_SETUP_ERROR_MESSAGE, attempted_id)]

        results: Dict[str, Outcome] = {}
        for package in packing_order:
            results[package.id] = await self._place(package, warehouse_id, current)

        return [
            results.get(package_id) or Rejected(package_id, FailureKind.NOT_FOUND, NOT_FOUND_MESSAGE)
            for package_id in package_ids
        ]

    async def _starting_pallet(self, pallet_id: str, warehouse_id: str, reuse: bool) -> _OpenPallet:
        existing = await self.store.get_pallet(pallet_id) if reuse else None
        if existing is None:
            return await self._open_pallet(pallet_id, warehouse_id)

        carried = await self.store.pallet_weight(existing.id)
        await self.store.update_pallet(existing.id, stowed_ts=self.store.now())
        return _OpenPallet(id=existing.id, weight_lbs=round(carried or 0.0, 2))

    async def _open_pallet(self, pallet_id: str, warehouse_id: str) -> _OpenPallet:
        await self.store.insert_pallet(Pallet(id=pallet_id, warehouse_id=warehouse_id, stowed_ts=self.store.now()))
        record_pallet_opened()
        logger.debug("pallet_opened", pallet_id=pallet_id, warehouse_id=warehouse_id)
        return _OpenPallet(id=pallet_id)

    async def _place(self, package: Package, warehouse_id: str, current: _OpenPallet) -> Outcome:
        if not self.rules.allows(package.status, PackageStatus.STOWED):
            return Rejected(
                package.id,
                FailureKind.INVALID_STATE,
                f"Cannot stow package with status {package.status.value}",
            )

        if package.warehouse_id != warehouse_id:
            return Rejected(
                package.id,
                FailureKind.WRONG_WAREHOUSE,
                f"Package belongs to a different warehouse ({package.warehouse_id})",
            )

        if self.rules.exceeds_cap(package.weight_lbs):
            return Rejected(
                package.id,
                FailureKind.OVER_WEIGHT_LIMIT,
                f"Package weight of {package.weight_lbs:g} exceeds weight limit "
                f"of {self.rules.max_pallet_weight_lbs:g} lbs",
            )

        if self.rules.exceeds_cap(current.weight_lbs + package.weight_lbs):
            try:
                fresh = await self._open_pallet(self.id_factory(), warehouse_id)
            except StorageError as exc:
                logger.error("pallet_open_failed", package_id=package.id, error=str(exc))
                return Rejected(package.id, FailureKind.STORAGE_ERROR, STOW_ERROR_MESSAGE)
            current.id, current.weight_lbs = fresh.id, fresh.weight_lbs

        try:
            await self.store.update_package(package.id, pallet_id=current.id, status=PackageStatus.STOWED)
        except StorageError as exc:
            logger.error("package_stow_failed", package_id=package.id, pallet_id=current.id, error=str(exc))
            return Rejected(package.id, FailureKind.STORAGE_ERROR, STOW_ERROR_MESSAGE)

        current.weight_lbs = round(current.weight_lbs + package.weight_lbs, 2)
        return Accepted(package.id, f"Package {PackageStatus.STOWED.value} successfully", current.id)
