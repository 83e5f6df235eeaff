"""Scenarios for simulating registry activity."""

from estate_registry.scenarios.market import MarketScenario

__all__ = ["MarketScenario"]
