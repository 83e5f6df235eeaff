"""Domain models for the property registry."""

from estate_registry.models.base import LifecycleEvent, require_identity
from estate_registry.models.enums import (
    DepositStatus,
    GiftStatus,
    PropertyClass,
    PropertyState,
    SaleStatus,
)
from estate_registry.models.offers import DepositOffer, GiftOffer, SaleOffer
from estate_registry.models.property import Property

__all__ = [
    "DepositOffer",
    "DepositStatus",
    "GiftOffer",
    "GiftStatus",
    "LifecycleEvent",
    "Property",
    "PropertyClass",
    "PropertyState",
    "SaleOffer",
    "SaleStatus",
    "require_identity",
]
