"""In-memory stores for properties and offers."""

from estate_registry.store.offers import OfferStore
from estate_registry.store.registry import PropertyRegistry

__all__ = ["OfferStore", "PropertyRegistry"]
