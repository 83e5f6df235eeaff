"""Tests for the market scenario."""

from decimal import Decimal

import pytest

from estate_registry.config import RegistryConfig, ScenarioConfig
from estate_registry.scenarios import MarketScenario


class TestMarketScenario:
    """Tests for MarketScenario."""

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_invariants_hold(self, seed: int) -> None:
        scenario = MarketScenario(num_participants=6, num_properties=4, rounds=300, seed=seed)

        exchange = scenario.generate()

        exchange.check_invariants()
        assert exchange.ledger.total() == Decimal(10_000 * 6)
        assert sum(scenario.get_outcomes().values()) > 0
        assert len(exchange.events) == 4 + sum(scenario.get_outcomes().values())

    def test_rejections_are_recorded(self, seed: int) -> None:
        scenario = MarketScenario(num_participants=4, num_properties=2, rounds=400, seed=seed)

        scenario.generate()

        assert sum(scenario.rejections.values()) > 0

    def test_reproducible(self, seed: int) -> None:
        first = MarketScenario(rounds=100, seed=seed)
        second = MarketScenario(rounds=100, seed=seed)

        first.generate()
        second.generate()

        assert first.get_outcomes() == second.get_outcomes()
        assert first.participants == second.participants

    def test_config_overrides_arguments(self, seed: int) -> None:
        config = ScenarioConfig(name="small", num_participants=3, num_properties=2, rounds=20)
        scenario = MarketScenario(num_participants=50, seed=seed, config=config)

        exchange = scenario.generate()

        assert len(scenario.participants) == 3
        assert len(exchange.list_properties()) == 2

    def test_registry_config_is_extended(self, seed: int) -> None:
        base = RegistryConfig(administrators=frozenset({"auditor"}), topic_prefix="sim")
        scenario = MarketScenario(rounds=5, seed=seed, registry_config=base)

        config = scenario.exchange.config
        assert config.administrators == frozenset({"auditor", "registrar"})
        assert config.topic_prefix == "sim"
        assert config.seed == seed
        assert base.administrators == frozenset({"auditor"})

    @pytest.mark.parametrize("participants,properties", [(0, 5), (5, 0)])
    def test_empty_market_rejected(self, participants: int, properties: int) -> None:
        with pytest.raises(ValueError):
            MarketScenario(num_participants=participants, num_properties=properties)
