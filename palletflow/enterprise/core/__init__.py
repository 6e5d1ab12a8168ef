"""Core domain package for the palletflow service."""

from .models import (
    Client,
    LifecycleRules,
    Package,
    PackageStatus,
    Pallet,
    Warehouse,
)
from .outcomes import Accepted, FailureKind, Outcome, Rejected

__all__ = [
    "Accepted",
    "Client",
    "FailureKind",
    "LifecycleRules",
    "Outcome",
    "Package",
    "PackageStatus",
    "Pallet",
    "Rejected",
    "Warehouse",
]
