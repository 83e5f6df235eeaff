#!/usr/bin/env python3
"""Run a simulated property market and export the final registry state.

The simulation registers properties for Faker-generated participants and
plays random sale, gift and deposit operations against one exchange,
checking the registry invariants after every step.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from estate_registry.config import KafkaConfig, RegistryConfig, ScenarioConfig
from estate_registry.logging import setup_logging
from estate_registry.scenarios import MarketScenario
from estate_registry.sinks import ConsoleSink, JsonFileSink, create_sinks

logger = logging.getLogger(__name__)


def build_config(args: argparse.Namespace) -> RegistryConfig:
    """Overlay command line options on the environment configuration."""
    config = RegistryConfig.from_env()
    output = replace(config.output, pretty_json=config.output.pretty_json or args.pretty)
    if args.output_dir:
        output = replace(output, events_dir=args.output_dir)
    kafka = config.kafka
    if args.kafka_bootstrap:
        kafka = KafkaConfig(bootstrap_servers=args.kafka_bootstrap)
    return replace(config, output=output, kafka=kafka, log_level=args.log_level or config.log_level)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Simulate sale, gift and deposit traffic on a property registry"
    )
    parser.add_argument(
        "--participants",
        type=int,
        default=10,
        help="Number of market participants (default: 10)",
    )
    parser.add_argument(
        "--properties",
        type=int,
        default=5,
        help="Number of properties to register (default: 5)",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=200,
        help="Number of operations to attempt (default: 200)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: $SEED, else 42)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write events (JSON Lines) and the final state (JSON) here (default: $EVENTS_DIR)",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print exported JSON",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        type=str,
        default=None,
        help="Also publish events to Kafka (default: $KAFKA_BOOTSTRAP_SERVERS)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: $LOG_LEVEL, else INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON",
    )

    args = parser.parse_args()
    if args.participants < 1 or args.properties < 1:
        parser.error("--participants and --properties must be at least 1")

    registry_config = build_config(args)
    seed = args.seed
    if seed is None:
        seed = registry_config.seed if registry_config.seed is not None else 42
    scenario_config = ScenarioConfig(
        name="market",
        num_participants=args.participants,
        num_properties=args.properties,
        rounds=args.rounds,
    )
    sinks = create_sinks(registry_config)
    scenario = MarketScenario(
        seed=seed, config=scenario_config, sinks=sinks, registry_config=registry_config
    )
    setup_logging(registry_config.log_level, "json" if args.json_logs else "standard", clock=scenario.clock)
    exchange = scenario.generate()

    logger.info("=" * 60)
    logger.info("Market simulation summary")
    logger.info("=" * 60)
    for key, value in exchange.summary().items():
        logger.info("  %s: %s", key, value)
    for name, count in sorted(scenario.get_outcomes().items()):
        logger.info("  committed %s: %d", name, count)
    for name, count in sorted(scenario.rejections.items()):
        logger.info("  rejected %s: %d", name, count)

    file_sinks = [s for s in sinks if isinstance(s, JsonFileSink)]
    if file_sinks:
        exchange.export(file_sinks[0])
    else:
        exchange.export(ConsoleSink(pretty=registry_config.output.pretty_json, max_records=10))
    exchange.close()


if __name__ == "__main__":
    main()
