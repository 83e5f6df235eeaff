"""Kafka sink for publishing lifecycle events to Kafka topics."""

import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import Producer

from estate_registry.config import KafkaConfig
from estate_registry.models import LifecycleEvent
from estate_registry.sinks.serialization import to_json

logger = logging.getLogger(__name__)

# Offers carry their property id too, so offer ids are looked up first
EXPORT_KEY_FIELDS = ("offer_id", "gift_id", "deposit_id", "property_id")


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Publish lifecycle events and state exports as JSON messages.

    Events are keyed by subject (``property/<id>``), so all events of one
    property land on the same partition in commit order. Exports go to
    ``<topic_prefix>.export.<entity_type>`` keyed by record id.

    Parameters
    ----------
    config : KafkaConfig | str
        Producer configuration or bootstrap servers string.
    topic_prefix : str
        Prefix of the export topics.
    """

    def __init__(self, config: KafkaConfig | str, topic_prefix: str = "registry") -> None:
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.topic_prefix = topic_prefix
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def _on_delivery(self, err: Any, msg: Any) -> None:
        if err:
            self.stats.failed += 1
            logger.error("Delivery to %s failed: %s", msg.topic(), err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _produce(
        self,
        topic: str,
        record: Any,
        key: str | None,
        headers: list[tuple[str, bytes]] | None = None,
    ) -> None:
        self.producer.produce(
            topic=topic,
            key=key.encode("utf-8") if key is not None else None,
            value=to_json(record).encode("utf-8"),
            headers=headers,
            on_delivery=self._on_delivery,
        )
        self.stats.sent += 1
        self.producer.poll(0)

    def publish(self, topic: str, event: LifecycleEvent) -> None:
        """Send one event; its type and source also travel as headers."""
        headers = [
            ("event_type", event.event_type.encode("utf-8")),
            ("source", event.source.encode("utf-8")),
        ]
        self._produce(topic, event, key=event.subject, headers=headers)

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Export a snapshot of one record type and wait for delivery."""
        topic = f"{self.topic_prefix}.export.{entity_type}"
        for record in records:
            self._produce(topic, record, key=self._record_key(record))
        self.flush()
        logger.info("Exported %d %s to %s", len(records), entity_type, topic)

    @staticmethod
    def _record_key(record: Any) -> str | None:
        for name in EXPORT_KEY_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                return str(value)
        return None

    def flush(self, timeout: float = 30.0) -> int:
        """Wait for outstanding deliveries; return how many are still queued."""
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d messages still queued after %.1fs", remaining, timeout)
        return remaining

    def close(self) -> None:
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
