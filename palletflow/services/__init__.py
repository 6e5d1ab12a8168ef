"""Service layer exports for the palletflow service."""

from .induction import InductionEngine
from .stowing import StowEngine

__all__ = [
	"InductionEngine",
	"StowEngine",
]
