"""Custody of value moved by lifecycle transitions."""

from estate_registry.custody.funds import FundsCustody, Hold, HoldKey
from estate_registry.custody.ledger import FundsLedger, InMemoryLedger

__all__ = ["FundsCustody", "FundsLedger", "Hold", "HoldKey", "InMemoryLedger"]
