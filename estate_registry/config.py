"""Configuration management for estate-registry."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from estate_registry.exceptions import ConfigurationError


@dataclass
class KafkaConfig:
    """Kafka producer configuration for lifecycle events."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Event output configuration."""

    events_dir: Path | None = None
    pretty_json: bool = False
    console: bool = False


@dataclass
class ScenarioConfig:
    """Configuration for a simulated market run."""

    name: str
    num_participants: int = 10
    num_properties: int = 5
    rounds: int = 200
    starting_balance: int = 10_000
    max_price: int = 2_000
    max_duration: int = 50
    residential_rate: float = 0.7


@dataclass
class RegistryConfig:
    """Main configuration for estate-registry."""

    administrators: frozenset[str] = frozenset()
    kafka: KafkaConfig | None = None
    output: OutputConfig = field(default_factory=OutputConfig)
    topic_prefix: str = "registry"
    escrow_identity: str = "custody"
    source: str = "estate-registry"
    seed: int | None = None
    log_level: str = "INFO"

    def validate(self) -> None:
        """Reject configurations the exchange cannot run with."""
        if not self.administrators:
            raise ConfigurationError("At least one administrator identity is required")
        if self.escrow_identity in self.administrators:
            raise ConfigurationError("Escrow identity cannot be an administrator")

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Create config from environment variables."""
        import os

        admins_str = os.getenv("REGISTRY_ADMINS", "")
        administrators = frozenset(a.strip() for a in admins_str.split(",") if a.strip())

        kafka = None
        if os.getenv("KAFKA_BOOTSTRAP_SERVERS"):
            kafka = KafkaConfig(
                bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
                acks=os.getenv("KAFKA_ACKS", "all"),
            )

        events_dir = os.getenv("EVENTS_DIR")
        output = OutputConfig(
            events_dir=Path(events_dir) if events_dir else None,
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
            console=os.getenv("EVENTS_CONSOLE", "false").lower() == "true",
        )

        return cls(
            administrators=administrators,
            kafka=kafka,
            output=output,
            topic_prefix=os.getenv("TOPIC_PREFIX", "registry"),
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
