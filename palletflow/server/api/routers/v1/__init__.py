"""Versioned API routers."""

from .clients import router as clients
from .health import router as health
from .observability import router as observability
from .packages import router as packages
from .pallets import router as pallets
from .warehouses import router as warehouses

__all__ = ["clients", "health", "observability", "packages", "pallets", "warehouses"]
