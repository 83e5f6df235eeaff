"""Lifecycle state machines for sales, gifts and collateral deposits."""

from estate_registry.lifecycle.base import BaseLifecycle
from estate_registry.lifecycle.deposit import DepositLifecycle
from estate_registry.lifecycle.gift import GiftLifecycle
from estate_registry.lifecycle.sale import SaleLifecycle

__all__ = ["BaseLifecycle", "DepositLifecycle", "GiftLifecycle", "SaleLifecycle"]
