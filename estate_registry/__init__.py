"""estate-registry: property ownership with sale, gift and deposit lifecycles."""

from estate_registry.clock import LogicalClock, SystemClock
from estate_registry.config import RegistryConfig
from estate_registry.exchange import PropertyExchange

__version__ = "0.1.0"

__all__ = ["LogicalClock", "PropertyExchange", "RegistryConfig", "SystemClock"]
