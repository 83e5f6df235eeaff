"""Synthetic data generators for registry simulations."""

from estate_registry.generators.base import BaseGenerator
from estate_registry.generators.identity import IdentityGenerator
from estate_registry.generators.property import PropertyDraft, PropertyGenerator

__all__ = ["BaseGenerator", "IdentityGenerator", "PropertyDraft", "PropertyGenerator"]
