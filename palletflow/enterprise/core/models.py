"""Domain models for the palletflow service.

These models provide a typed representation of the entities tracked by the
record store. They are intentionally framework-agnostic so they can be reused
by services, APIs, and persistence layers.
"""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat


class PackageStatus(str, enum.Enum):
    """Lifecycle states for a package within the warehouse."""

    PENDING = "PENDING"
    INDUCTED = "INDUCTED"
    STOWED = "STOWED"
    STAGED = "STAGED"
    PICKED = "PICKED"

    @classmethod
    def ordered(cls) -> Tuple["PackageStatus", ...]:
        return tuple(cls)

    def successor(self) -> Optional["PackageStatus"]:
        """Return the only stage a package may move to next, if any."""

        stages = self.ordered()
        index = stages.index(self)
        if index + 1 < len(stages):
            return stages[index + 1]
        return None


class LifecycleRules(BaseModel):
    """Immutable limits shared by the induction and stow engines."""

    model_config = ConfigDict(frozen=True)

    max_pallet_weight_lbs: PositiveFloat = 500.0

    def allows(self, current: PackageStatus, target: PackageStatus) -> bool:
        return current.successor() == target

    def exceeds_cap(self, weight_lbs: float) -> bool:
        # Weights are kept to the cent; compare at that precision.
        return round(weight_lbs, 2) > self.max_pallet_weight_lbs


class Warehouse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    location: Optional[str] = None


class Client(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: Optional[str] = None


class Pallet(BaseModel):
    """A physical unit aggregating packages up to the weight cap."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    warehouse_id: str
    label: Optional[str] = None
    storage_location: Optional[str] = None
    stowed_ts: Optional[datetime] = None
    staged_ts: Optional[datetime] = None
    picked_ts: Optional[datetime] = None


class Package(BaseModel):
    """A client shipment moving through the warehouse lifecycle."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    weight_lbs: PositiveFloat
    client_id: str
    status: PackageStatus = PackageStatus.PENDING
    service_date: Optional[date] = None
    received_ts: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    warehouse_id: Optional[str] = None
    pallet_id: Optional[str] = None

    def stow_order_key(self) -> tuple:
        """Sort key grouping packages by service date, lightest first.

        Packages without a service date sort before every dated package,
        matching how SQLite orders NULL dates ascending.
        """

        return (
            self.service_date is not None,
            self.service_date or date.min,
            self.weight_lbs,
        )
