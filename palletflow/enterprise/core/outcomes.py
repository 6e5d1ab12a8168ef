"""Per-package outcomes produced by the lifecycle engines."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


class FailureKind(str, enum.Enum):
    NOT_FOUND_OR_FOREIGN = "not_found_or_foreign"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    OVER_WEIGHT_LIMIT = "over_weight_limit"
    WRONG_WAREHOUSE = "wrong_warehouse"
    STORAGE_ERROR = "storage_error"
    PRE_CREATION_ABORT = "pre_creation_abort"


@dataclass(frozen=True)
class Accepted:
    """The requested transition was applied."""

    package_id: str
    message: str
    pallet_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """The transition was refused or could not be stored."""

    package_id: Optional[str]
    kind: FailureKind
    message: str
    pallet_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return False


Outcome = Union[Accepted, Rejected]
