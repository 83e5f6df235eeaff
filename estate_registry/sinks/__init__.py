"""Output sinks for lifecycle events and registry exports."""

from estate_registry.config import RegistryConfig
from estate_registry.sinks.base import EventSink
from estate_registry.sinks.console import ConsoleSink
from estate_registry.sinks.json_file import JsonFileSink


def create_sinks(config: RegistryConfig) -> list[EventSink]:
    """Build the sinks enabled in ``config``."""
    sinks: list[EventSink] = []
    if config.output.console:
        sinks.append(ConsoleSink(pretty=config.output.pretty_json))
    if config.output.events_dir is not None:
        sinks.append(JsonFileSink(config.output.events_dir, pretty=config.output.pretty_json))
    if config.kafka is not None:
        from estate_registry.sinks.kafka import KafkaSink

        sinks.append(KafkaSink(config.kafka, topic_prefix=config.topic_prefix))
    return sinks


__all__ = ["ConsoleSink", "EventSink", "JsonFileSink", "create_sinks"]
